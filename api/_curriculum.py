import re
from collections import namedtuple

CurriculumEntry = namedtuple('CurriculumEntry', ['id', 'title', 'guide_html'])

DEFAULT_LESSON_ID = '1'

# Guide markup is authored here and rendered verbatim.
_LESSONS = [
    ('1', 'Print & Variables', '''<h2>Lesson 1: print() and Variables</h2>
<p><strong>print()</strong> sends text/values to output. <strong>Variable</strong> = named box storing a value.</p>
<pre class="mono">name="Ada"; age=20
print("Hello", name, "you are", age)</pre>'''),
    ('2', 'Data Types', '<h2>Lesson 2: Data Types</h2><p>int, float, str, bool · convert with int()/float()/str() · check with type(x).</p>'),
    ('3', 'Operators', '<h2>Lesson 3: Operators</h2><p>+ - * / // % ** · == != &lt; &gt; &lt;= &gt;=</p>'),
    ('4', 'If / Else', '<h2>Lesson 4: If / Else</h2><p>if / elif / else · truthiness.</p>'),
    ('5', 'Loops', '<h2>Lesson 5: Loops</h2><p>for / while · break / continue.</p>'),
    ('6', 'Functions', '<h2>Lesson 6: Functions</h2><p>def, params, return. Small &amp; testable.</p>'),
    ('7', 'Lists & Tuples', '<h2>Lesson 7: Lists &amp; Tuples</h2><p>Lists mutable; tuples immutable.</p>'),
    ('8', 'Dictionaries & Sets', '<h2>Lesson 8: Dictionaries &amp; Sets</h2><p>Key→value; sets store uniques.</p>'),
    ('9', 'File Handling', '<h2>Lesson 9: File Handling</h2><p>open + context manager (with).</p>'),
    ('10', 'Classes & OOP', '<h2>Lesson 10: Classes &amp; OOP</h2><p>Class blueprint; objects instances.</p>'),
    ('11', 'Modules & Packages', '<h2>Lesson 11: Modules &amp; Packages</h2><p>import / from x import y.</p>'),
    ('12', 'Error Handling', '<h2>Lesson 12: Error Handling</h2><p>try / except / else / finally.</p>'),
    ('13', 'Final Project', '<h2>Lesson 13: Final Project</h2><p>Plan → build → iterate.</p>'),
]

CURRICULUM = {lid: CurriculumEntry(lid, title, guide) for lid, title, guide in _LESSONS}


def normalize_lesson_id(value) -> str:
    return str(value if value is not None else '').strip()


def lookup(lesson_id) -> CurriculumEntry:
    """Return the lesson for `lesson_id`, falling back to lesson 1."""
    return CURRICULUM.get(normalize_lesson_id(lesson_id), CURRICULUM[DEFAULT_LESSON_ID])


def guide_excerpt(entry: CurriculumEntry, limit: int = 400) -> str:
    return re.sub(r'<[^>]+>', ' ', entry.guide_html)[:limit]
