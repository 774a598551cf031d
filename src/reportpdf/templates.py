"""Built-in document templates.

``DEFAULT_TEMPLATE`` is the certified-letter (내용증명서) skeleton the editor
starts from when no generated document is available.  The exporter falls back
to it when the editing surface yields empty content.
"""

from __future__ import annotations

__all__ = ["DEFAULT_TEMPLATE", "content_or_default"]

DEFAULT_TEMPLATE = """
<h2 style="text-align:center;">내용증명서</h2>
<p>■ 일 시:</p>
<p>■ 수신자: (    -    )</p>
<p>■ 주 소:</p>
<p>■ 발신자: (    -    )</p>
<p>■ 주 소:</p>
<p>■ 제 목: 누락된 퇴직금지급 관련 내용증명</p>
<p>1. 귀하(사)의 무궁한 발전을 기원합니다.</p>
<p>2. 다음이 아니고 본인은 귀사에서 ...</p>
<p>3. 본인은 퇴직후 지급받은 퇴직금을 확인해 본 결과 ...</p>
<p>발신인 : (인)</p>
""".strip()


def content_or_default(markup: str | None) -> str:
    """Return ``markup`` unless it is empty or whitespace only."""

    if markup is None or not markup.strip():
        return DEFAULT_TEMPLATE
    return markup
