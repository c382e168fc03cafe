"""
DeepSeek 응답 분리기
- 영어 답변과 중국어 번역을 분리
- <div class="translation"> 마커 우선, 없으면 마지막 줄을 번역으로 취급
"""
from dataclasses import dataclass, asdict
from typing import Dict, Any

TRANSLATION_MARKER = '<div class="translation">'
TRANSLATION_CLOSE = "</div>"

# 한 줄짜리 응답에서 번역을 찾지 못했을 때 반환
TRANSLATION_PLACEHOLDER = "中文翻译未能正确提取，请查看英文回复内容。"


@dataclass
class RelayResult:
    """영어 답변 + 중국어 번역"""
    text: str
    translation: str
    success: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def split_response(content: str) -> RelayResult:
    """
    모델 응답을 (영어, 번역) 으로 분리합니다.
    모델이 요청한 형식을 따르지 않으면 fallback 으로 떨어지며,
    이때 내용이 잘못된 쪽에 들어갈 수 있습니다.
    """
    if TRANSLATION_MARKER in content:
        english, _, tail = content.partition(TRANSLATION_MARKER)
        tail = tail.rstrip()
        if tail.endswith(TRANSLATION_CLOSE):
            tail = tail[:-len(TRANSLATION_CLOSE)]
        return RelayResult(text=english.strip(), translation=tail.strip())

    lines = content.split("\n")
    if len(lines) > 1:
        return RelayResult(
            text="\n".join(lines[:-1]).strip(),
            translation=lines[-1].strip()
        )

    return RelayResult(text=content, translation=TRANSLATION_PLACEHOLDER)
