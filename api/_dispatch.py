import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from urllib.parse import parse_qsl, urlsplit

from werkzeug.datastructures import Headers

from api._config import Settings
from api._cors import cors_headers
from api._curriculum import DEFAULT_LESSON_ID, guide_excerpt, lookup
from api._forms import decode_form
from api._html import card, escape_html, render
from api._openai import CONFIG_ERROR, CompletionClient, CompletionError

logger = logging.getLogger("api")

MAX_USER_TEXT = 4000
MAX_CODE = 10000
GUIDE_EXCERPT_CHARS = 400


# ---------- request / response ----------

@dataclass(frozen=True)
class RequestContext:
    method: str
    path: str = '/'
    query: dict = field(default_factory=dict)
    headers: Headers = field(default_factory=Headers)
    body: bytes | str | None = None
    is_base64_encoded: bool = False

    @classmethod
    def from_event(cls, event: dict) -> "RequestContext":
        """Build from a Lambda/Netlify style event dict."""
        raw_url = event.get('rawUrl') or ''
        path = event.get('path') or '/'
        query = dict(event.get('queryStringParameters') or {})
        if raw_url:
            parts = urlsplit(raw_url)
            path = parts.path or path
            # the raw URL wins when both are present; first occurrence of a key wins
            raw_query = {}
            for k, v in parse_qsl(parts.query, keep_blank_values=True):
                raw_query.setdefault(k, v)
            query.update(raw_query)
        return cls(
            method=(event.get('httpMethod') or 'GET').upper(),
            path=path,
            query=query,
            headers=Headers(list((event.get('headers') or {}).items())),
            body=event.get('body'),
            is_base64_encoded=bool(event.get('isBase64Encoded')),
        )

    @classmethod
    def from_flask(cls, request) -> "RequestContext":
        return cls(
            method=request.method.upper(),
            path=request.path,
            query=request.args.to_dict(),
            headers=Headers(list(request.headers.items())),
            body=request.get_data(cache=True),
        )


@dataclass(frozen=True)
class ResponseEnvelope:
    status_code: int
    headers: dict
    body: str

    def to_dict(self) -> dict:
        return {'statusCode': self.status_code, 'headers': dict(self.headers), 'body': self.body}

    def as_wsgi(self):
        return (self.body, self.status_code, dict(self.headers))


# ---------- actions ----------

class Action(str, Enum):
    LESSON = 'lesson'
    TUTOR = 'tutor'
    QUIZ = 'quiz'
    SAVE_PROFILE = 'save-profile'
    SAVE_SNIPPET = 'save-snippet'
    EXPORT_PROGRESS = 'export-progress'
    IMPORT_PROGRESS = 'import-progress'
    RESET_PROGRESS = 'reset-progress'
    UNKNOWN = '__unknown__'

    @classmethod
    def parse(cls, value) -> "Action":
        if value is None or value == '':
            return cls.TUTOR
        try:
            action = cls(value)
        except ValueError:
            return cls.UNKNOWN
        return action


def _field(form: dict, name: str, default: str = '', limit: int | None = None) -> str:
    value = form.get(name)
    if value is None or value == '' or not isinstance(value, str):
        value = default
    return value[:limit] if limit is not None else value


def _now_iso() -> str:
    # matches JavaScript's Date.toISOString(), which the widget front end expects
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


@dataclass(frozen=True)
class LessonFields:
    lesson_id: str = DEFAULT_LESSON_ID

    @classmethod
    def from_form(cls, form: dict) -> "LessonFields":
        return cls(lesson_id=_field(form, 'lesson_id', DEFAULT_LESSON_ID).strip() or DEFAULT_LESSON_ID)


@dataclass(frozen=True)
class TutorFields:
    lesson_id: str = DEFAULT_LESSON_ID
    user_text: str = ''

    @classmethod
    def from_form(cls, form: dict) -> "TutorFields":
        return cls(
            lesson_id=LessonFields.from_form(form).lesson_id,
            user_text=_field(form, 'user_text', '', MAX_USER_TEXT),
        )


@dataclass(frozen=True)
class ProfileFields:
    name: str = ''
    level: str = ''
    goal: str = ''
    pace: str = ''
    focus: str = ''
    consent: str = ''

    @classmethod
    def from_form(cls, form: dict) -> "ProfileFields":
        return cls(**{k: _field(form, k) for k in ('name', 'level', 'goal', 'pace', 'focus', 'consent')})


@dataclass(frozen=True)
class SnippetFields:
    code: str = ''

    @classmethod
    def from_form(cls, form: dict) -> "SnippetFields":
        return cls(code=_field(form, 'code', '', MAX_CODE))


def _pretty(record: dict) -> str:
    return escape_html(json.dumps(record, indent=2, ensure_ascii=False))


TUTOR_SYSTEM_PROMPT = (
    'You are PyTutor, a concise Python teacher. NO markdown code fences; '
    'if you give code, prefix with "Code:" on a new line and keep it very short.'
)


def tutor_prompts(fields: TutorFields) -> tuple:
    entry = lookup(fields.lesson_id)
    user = (
        f"Lesson {fields.lesson_id}: {entry.title}\n"
        f"Guide: {guide_excerpt(entry, GUIDE_EXCERPT_CHARS)}\n"
        f"Student asks: {fields.user_text}\n"
        "Keep it short, clear, and actionable."
    )
    return TUTOR_SYSTEM_PROMPT, user


def quiz_prompts(fields: LessonFields) -> tuple:
    title = lookup(fields.lesson_id).title
    system = f'You are PyTutor. Produce ONE MCQ (A–D) about "{title}". Keep it short. End with "Answer: X".'
    user = f'Create one MCQ about "{title}" with options A–D and final line "Answer: X".'
    return system, user


def _lesson(form, client):
    fields = LessonFields.from_form(form)
    entry = lookup(fields.lesson_id)
    return card(
        f'{escape_html(fields.lesson_id)}. {entry.title}',
        f'{entry.guide_html}\n  <small class="mono">Tip: Use “Quiz me” in the Tutor.</small>',
    )


def _tutor(form, client):
    system, user = tutor_prompts(TutorFields.from_form(form))
    reply = client.complete(system, user)
    return card('Tutor', f'<div class="mono">{escape_html(reply)}</div>')


def _quiz(form, client):
    system, user = quiz_prompts(LessonFields.from_form(form))
    out = client.complete(system, user)
    return card('Quiz', f'<pre class="mono">{escape_html(out)}</pre>')


def _save_profile(form, client):
    fields = ProfileFields.from_form(form)
    profile = {
        'name': fields.name,
        'level': fields.level,
        'goal': fields.goal,
        'pace': fields.pace,
        'focus': fields.focus,
        'consent': fields.consent,
        'updated_at': _now_iso(),
    }
    return card(
        'Profile Saved',
        f'<pre class="mono">{_pretty(profile)}</pre>\n'
        '  <small class="mono">Copy this JSON if you want to keep a local record.</small>',
    )


def _save_snippet(form, client):
    fields = SnippetFields.from_form(form)
    payload = {'code': fields.code, 'saved_at': _now_iso()}
    return card('Snippet Saved', f'<pre class="mono">{_pretty(payload)}</pre>')


def _export_progress(form, client):
    # illustrative record; nothing is stored server-side
    sample = {'current': 1, 'completed': [1, 2], 'exported_at': _now_iso()}
    return card(
        'Export',
        f'<pre class="mono">{_pretty(sample)}</pre>\n'
        '  <small class="mono">This demo does not persist server-side.</small>',
    )


def _import_progress(form, client):
    return card('Import', '<p class="mono">Import received (demo only; not persisted).</p>')


def _reset_progress(form, client):
    return card('Progress Reset', '<p class="mono">Progress cleared (demo).</p>')


def _noop(form, client):
    return card('OK', '<p class="mono">No-op.</p>')


HANDLERS = {
    Action.LESSON: _lesson,
    Action.TUTOR: _tutor,
    Action.QUIZ: _quiz,
    Action.SAVE_PROFILE: _save_profile,
    Action.SAVE_SNIPPET: _save_snippet,
    Action.EXPORT_PROGRESS: _export_progress,
    Action.IMPORT_PROGRESS: _import_progress,
    Action.RESET_PROGRESS: _reset_progress,
    Action.UNKNOWN: _noop,
}


def _log_failure(action: Action, err: Exception) -> None:
    if isinstance(err, CompletionError):
        if err.kind == CONFIG_ERROR:
            logger.warning("[%s] completion not configured: %s", action.value, err.detail)
        else:
            logger.error("[%s] completion upstream failure: %s", action.value, err.detail[:500])
        return
    logger.exception("[%s] unhandled error", action.value)


def handle(ctx: RequestContext, settings: Settings, client: CompletionClient | None = None) -> ResponseEnvelope:
    """Serve one widget request. Always returns a complete envelope."""
    headers = cors_headers(ctx.headers.get('Origin', ''), settings.allow_origins)

    if ctx.method == 'OPTIONS':
        logger.debug("Preflight for %s", ctx.path)
        return ResponseEnvelope(200, headers, '')

    action = Action.parse(ctx.query.get('action'))
    client = client or CompletionClient(settings)
    try:
        form = decode_form(ctx.headers.get('Content-Type', ''), ctx.body, ctx.is_base64_encoded)
        fragment = HANDLERS[action](form, client)
    except Exception as e:  # noqa: BLE001
        _log_failure(action, e)
        message = escape_html(str(e) or e.__class__.__name__)
        body = render(f'<div class="card"><h2>Error</h2><p class="mono err">{message}</p></div>')
        return ResponseEnvelope(500, headers, body)

    logger.info("[%s] 200 (%s)", action.value, ctx.path)
    return ResponseEnvelope(200, headers, render(fragment))
