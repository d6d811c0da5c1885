"""HTML rendering for the session UI.

Every function here is a pure function of its arguments.
"""

from html import escape

from calorie_lens.domain.history import AppState, HistoryEntry
from calorie_lens.domain.nutrition import NutritionEstimate
from calorie_lens.services.session_state import (
    goal_progress,
    share_of_goal,
    total_calories,
)

_MACRO_FLOOR = 100
_MISSING = "—"


def render_page(state: AppState, goal: int) -> str:
    """Render the full page for one session."""
    sections = [render_uploader(state)]
    if state.history:
        sections.insert(0, render_stats(state, goal))
    if state.error:
        sections.append(render_error(state.error))
    if state.analysis is not None:
        sections.append(render_result(state.analysis, goal))
    if state.history:
        sections.append(render_history(state.history))
    if state.preview is None and not state.history:
        sections.append(render_empty_state())
    return _PAGE_HEAD + "\n".join(sections) + _PAGE_TAIL


def render_stats(state: AppState, goal: int) -> str:
    """Render today's intake against the daily goal."""
    return (
        '<section class="card stats">'
        "<div class=\"row\"><strong>今日摄入</strong>"
        f"<span><b>{format_number(total_calories(state))}</b> / {goal} 千卡</span>"
        "</div>"
        f"{_bar(goal_progress(state, goal), 'var(--primary)')}"
        "</section>"
    )


def render_uploader(state: AppState) -> str:
    """Render the upload form, showing the current preview if any."""
    preview = ""
    if state.preview:
        preview = (
            f'<img class="preview" src="{escape(state.preview)}" alt="食物图片" />'
            '<form method="post" action="/ui/clear">'
            '<button type="submit">清除</button></form>'
        )
    status = '<p class="muted">AI 正在分析...</p>' if state.is_analyzing else ""
    return (
        '<section class="card">'
        f"{preview}{status}"
        '<form method="post" action="/ui/analyze" enctype="multipart/form-data">'
        '<input type="file" name="photo" accept="image/*" capture="environment" />'
        '<button type="submit">分析</button>'
        "</form></section>"
    )


def render_error(message: str) -> str:
    """Render an error banner."""
    return f'<section class="card error">{escape(message)}</section>'


def render_result(estimate: NutritionEstimate, goal: int) -> str:
    """Render one nutrition estimate with macro bars."""
    nutrients = [
        ("蛋白质", estimate.protein, "var(--protein)"),
        ("碳水化合物", estimate.carbs, "var(--carbs)"),
        ("脂肪", estimate.fat, "var(--fat)"),
        ("膳食纤维", estimate.fiber, "var(--fiber)"),
    ]
    macro_max = max(
        _amount(estimate.protein),
        _amount(estimate.carbs),
        _amount(estimate.fat),
        _MACRO_FLOOR,
    )
    rows = "".join(
        '<div class="nutrient">'
        f'<div class="row"><span>{label}</span>'
        f"<span>{format_number(value)}{'g' if _is_number(value) else ''}</span></div>"
        f"{_bar(_amount(value) / macro_max * 100, color)}"
        "</div>"
        for label, value, color in nutrients
    )
    confidence = _MISSING
    if _is_number(estimate.confidence):
        confidence = f"{round(estimate.confidence * 100)}%"
    elif estimate.confidence is not None:
        confidence = escape(str(estimate.confidence))
    return (
        '<section class="card result">'
        f'<div class="row"><h2>{escape(estimate.name)}</h2>'
        f'<span class="pill">{confidence} 准确度</span></div>'
        f'<p class="muted">份量: {_text(estimate.serving_size)}</p>'
        f'<p class="calories"><b>{format_number(estimate.calories)}</b> 千卡</p>'
        f"{rows}"
        '<p class="tip">提示: 这份食物占每日推荐摄入量的 '
        f"<b>{share_of_goal(estimate, goal)}%</b></p>"
        "</section>"
    )


def render_history(history: tuple[HistoryEntry, ...]) -> str:
    """Render the session history, newest first."""
    total = sum(entry.estimate.calories for entry in history)
    items = "".join(_render_history_item(entry) for entry in history)
    return (
        '<section class="card">'
        f'<div class="row"><h3>今日记录</h3><b>{format_number(total)} 千卡</b></div>'
        f'<ul class="history">{items}</ul>'
        "</section>"
    )


def render_empty_state() -> str:
    """Render the first-visit hint."""
    return (
        '<section class="empty">'
        "<h3>开始你的健康之旅</h3>"
        '<p class="muted">上传食物图片，AI 将自动识别并计算卡路里和营养成分</p>'
        "</section>"
    )


def format_number(value: object) -> str:
    """Format a nutrient value the way the model reported it."""
    if value is None:
        return _MISSING
    if not _is_number(value):
        return escape(str(value))
    if isinstance(value, int):
        return str(value)
    return f"{value:.1f}".rstrip("0").rstrip(".")


def _render_history_item(entry: HistoryEntry) -> str:
    estimate = entry.estimate
    entry_id = escape(entry.id)
    return (
        "<li>"
        f'<img src="{escape(entry.image)}" alt="{escape(estimate.name)}" />'
        f'<div class="grow"><p>{escape(estimate.name)}</p>'
        f'<p class="muted">{format_number(estimate.calories)} 千卡 · '
        f"{_text(estimate.serving_size)}</p></div>"
        f'<form method="post" action="/ui/history/{entry_id}/select">'
        '<button type="submit">查看</button></form>'
        f'<form method="post" action="/ui/history/{entry_id}/delete">'
        '<button type="submit">删除</button></form>'
        "</li>"
    )


def _is_number(value: object) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def _amount(value: object) -> float:
    """Return a numeric nutrient value, or 0 for missing or non-numeric ones."""
    return value if _is_number(value) else 0


def _text(value: object) -> str:
    return _MISSING if value is None else escape(str(value))


def _bar(percent: float, color: str) -> str:
    width = max(0.0, min(percent, 100.0))
    return (
        '<div class="bar">'
        f'<div class="fill" style="width: {width:.0f}%; background: {color}"></div>'
        "</div>"
    )


_PAGE_HEAD = """<!doctype html>
<html lang="zh-CN">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>AI 卡路里</title>
    <style>
      :root {
        --primary: #16a34a; --protein: #0ea5e9; --carbs: #f59e0b;
        --fat: #e11d48; --fiber: #22c55e;
      }
      body { font-family: ui-sans-serif, system-ui, sans-serif; margin: 0; }
      header, main { max-width: 42rem; margin: 0 auto; padding: 1rem; }
      .card { border: 1px solid #e5e7eb; border-radius: 1rem; padding: 1rem;
        margin-bottom: 1rem; }
      .row { display: flex; justify-content: space-between; align-items: center; }
      .muted { color: #6b7280; font-size: 0.9rem; }
      .error { color: #b91c1c; background: #fef2f2; }
      .pill { background: #dcfce7; border-radius: 999px; padding: 0.2rem 0.7rem; }
      .calories { font-size: 2rem; text-align: center; }
      .bar { background: #f3f4f6; border-radius: 999px; height: 0.5rem; }
      .fill { height: 100%; border-radius: 999px; }
      .preview { max-width: 100%; border-radius: 0.75rem; }
      .history { list-style: none; padding: 0; }
      .history li { display: flex; gap: 0.75rem; align-items: center;
        margin-bottom: 0.5rem; }
      .history img { width: 3.5rem; height: 3.5rem; object-fit: cover;
        border-radius: 0.5rem; }
      .grow { flex: 1; }
      .empty { text-align: center; padding: 2rem 0; }
    </style>
  </head>
  <body>
    <header><h1>AI 卡路里</h1><p class="muted">智能食物分析</p></header>
    <main>
"""

_PAGE_TAIL = """
    </main>
  </body>
</html>
"""
