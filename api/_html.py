import html

_HEAD = '''<!DOCTYPE html><html><head>
<meta charset="utf-8"><meta name="viewport" content="width=device-width,initial-scale=1">
<link rel="preconnect" href="https://fonts.googleapis.com"><link rel="preconnect" href="https://fonts.gstatic.com" crossorigin>
<link href="https://fonts.googleapis.com/css2?family=Bitcount+Grid+Single:wght@400;700&family=JetBrains+Mono:wght@400;600;700&display=swap" rel="stylesheet">
<style>
  body{margin:0;font:14px/1.55 system-ui,-apple-system,Segoe UI,Roboto,Arial;background:#fff;color:#0b1220}
  h2,h3{font-family:"Bitcount Grid Single",system-ui;margin:0 0 8px}
  .mono{font-family:"JetBrains Mono",ui-monospace,Menlo,Consolas,monospace}
  .card{border:1px solid #e7edf7;border-radius:12px;padding:12px;margin:8px}
  .ok{color:#19a974;font-weight:700}.err{color:#e04f54;font-weight:700}
  pre{white-space:pre-wrap;border:1px solid #e7edf7;border-radius:10px;padding:10px}
  small{color:#52607a}
</style></head><body>'''

_TAIL = '</body></html>'


def escape_html(s) -> str:
    return html.escape(str(s if s is not None else ''), quote=True)


def render(fragment: str) -> str:
    """Wrap a body fragment in the widget's fixed document shell. Does not escape."""
    return f"{_HEAD}{fragment}{_TAIL}"


def card(title: str, inner: str) -> str:
    return f'<div class="card">\n  <h2>{title}</h2>\n  {inner}\n</div>'
