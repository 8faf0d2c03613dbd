# app/core/labels.py
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Tuple

# "Ammonia (NH3)" -> ("Ammonia", "NH3")，不锚定首尾
NAMED_PATTERN = re.compile(r"(.*?)\s*\((.*?)\)")

MIXTURE_MARKER = " in 1"
MIXTURE_SEPARATOR = " in 1 "


class LabelKind(str, Enum):
    MIXTURE = "MIXTURE"   # 复合气 "4 in 1 (O2,LEL,CO,H2S)"
    NAMED = "NAMED"       # 单一气体 "Chlorine (Cl2)"
    RAW = "RAW"           # 无法识别，原样返回


@dataclass(frozen=True)
class ParsedLabel:
    kind: LabelKind
    display_name: str
    components: Tuple[str, ...]


def match_mixture(label: str) -> Optional[ParsedLabel]:
    """
    复合气标签: "<N> in 1 (<c1>,<c2>,...)"
    显示名统一为 "<N>-in-1 Gas Mixture"
    """
    if MIXTURE_MARKER not in label:
        return None

    count, sep, rest = label.partition(MIXTURE_SEPARATOR)
    if not sep:
        # 只有 " in 1" 没有后续组分，交给下一条规则
        return None

    components = tuple(
        piece.strip() for piece in rest.replace("(", "").replace(")", "").split(",")
    )
    return ParsedLabel(
        kind=LabelKind.MIXTURE,
        display_name=f"{count}-in-1 Gas Mixture",
        components=components,
    )


def match_named(label: str) -> Optional[ParsedLabel]:
    """单一气体标签: "<Name> (<Symbol>)" """
    match = NAMED_PATTERN.search(label)
    if not match:
        return None
    return ParsedLabel(
        kind=LabelKind.NAMED,
        display_name=match.group(1).strip(),
        components=(match.group(2).strip(),),
    )


def match_raw(label: str) -> ParsedLabel:
    return ParsedLabel(kind=LabelKind.RAW, display_name=label, components=(label,))


# 按顺序尝试，先匹配先得
LABEL_MATCHERS: Tuple[Callable[[str], Optional[ParsedLabel]], ...] = (
    match_mixture,
    match_named,
)


def parse_gas_label(label: str) -> ParsedLabel:
    """
    解析气瓶标签，得到显示名和组分列表
    对任意字符串都有结果 (最后兜底为 RAW)
    """
    for matcher in LABEL_MATCHERS:
        parsed = matcher(label)
        if parsed is not None:
            return parsed
    return match_raw(label)
