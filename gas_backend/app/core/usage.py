# app/core/usage.py
import logging
import math
import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext
from enum import Enum
from typing import Optional

from app.core.catalog import Catalog
from app.core.constants import VOLUME_UNIT

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")

# 单项计数上限，宽松模式下同样生效
MAX_COUNT = 1_000_000_000

# 与前端 parseInt 一致: 取开头的整数部分 "12abc" -> 12, "1.5" -> 1
LEADING_INT = re.compile(r"\s*([+-]?)([0-9]+)")


class ErrorKind(str, Enum):
    MISSING_FIELD = "missing_field"
    UNKNOWN_GAS_TYPE = "unknown_gas_type"
    INVALID_NUMBER = "invalid_number"
    OUT_OF_RANGE = "out_of_range"

    @property
    def message(self) -> str:
        return ERROR_MESSAGES[self]


ERROR_MESSAGES = {
    ErrorKind.MISSING_FIELD: "Please fill in all fields",
    ErrorKind.UNKNOWN_GAS_TYPE: "Invalid gas type selected",
    ErrorKind.INVALID_NUMBER: "Please enter valid numbers",
    ErrorKind.OUT_OF_RANGE: "Please enter values within the allowed range",
}


@dataclass(frozen=True)
class UsageResult:
    """计算结果: liters 与 error 二选一"""
    liters: Optional[float] = None
    error: Optional[ErrorKind] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> Optional[str]:
        return self.error.message if self.error else None

    @property
    def formatted(self) -> Optional[str]:
        return format_liters(self.liters) if self.ok else None

    def to_dict(self) -> dict:
        return {
            "usage_liters": self.liters,
            "formatted": self.formatted,
            "error": {"kind": self.error.value, "message": self.message} if self.error else None,
        }


def round_liters(value: float) -> float:
    """
    保留两位小数，四舍五入 (half away from zero)
    以浮点数的最短十进制表示为准: 10.005 -> 10.01
    """
    if not math.isfinite(value):
        return value
    exact = Decimal(repr(value))
    with localcontext() as ctx:
        # 精度随数量级放大，避免 quantize 越界
        ctx.prec = max(ctx.prec, exact.adjusted() + 4)
        return float(exact.quantize(TWO_PLACES, rounding=ROUND_HALF_UP))


def format_liters(value: float) -> str:
    # 10.0 -> "10 Liters", 0.38 -> "0.38 Liters"
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    if text == "-0":
        text = "0"
    return f"{text} {VOLUME_UNIT}"


def _is_blank(value) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def _parse_count(value) -> Optional[int]:
    """表单输入 -> 整数，无法解析返回 None"""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    match = LEADING_INT.match(str(value))
    if not match:
        return None
    sign, digits = match.groups()
    digits = digits.lstrip("0") or "0"
    if len(digits) > len(str(MAX_COUNT)):
        # 超长数字不转换，直接按越界处理
        count = MAX_COUNT + 1
    else:
        count = int(digits)
    return -count if sign == "-" else count


def calculate_usage(catalog: Catalog, gas_type, tests_per_month, calibrations_per_month,
                    instruments, allow_out_of_range: bool = False) -> UsageResult:
    """
    月度用气量估算 (L)
    usage = ((bump * tests * flow) + (cal * calibrations * flow)) * instruments
    """
    # 1. 必填检查
    raw_counts = (tests_per_month, calibrations_per_month, instruments)
    if _is_blank(gas_type) or any(_is_blank(v) for v in raw_counts):
        logger.info("Usage request rejected: missing field")
        return UsageResult(error=ErrorKind.MISSING_FIELD)

    # 2. 气瓶类型
    cylinder = catalog.get(gas_type)
    if cylinder is None:
        logger.info("Usage request rejected: unknown gas type %r", gas_type)
        return UsageResult(error=ErrorKind.UNKNOWN_GAS_TYPE)

    # 3. 数字解析
    tests, calibrations, instrument_count = (_parse_count(v) for v in raw_counts)
    if tests is None or calibrations is None or instrument_count is None:
        logger.info("Usage request rejected: invalid number in %r", raw_counts)
        return UsageResult(error=ErrorKind.INVALID_NUMBER)

    # 4. 范围检查 (符号检查可通过配置关闭，上限始终检查)
    counts = (tests, calibrations, instrument_count)
    if any(abs(count) > MAX_COUNT for count in counts):
        logger.info("Usage request rejected: count above %d in %r", MAX_COUNT, raw_counts)
        return UsageResult(error=ErrorKind.OUT_OF_RANGE)
    if not allow_out_of_range:
        if tests < 0 or calibrations < 0 or instrument_count < 1:
            logger.info("Usage request rejected: out of range %r", raw_counts)
            return UsageResult(error=ErrorKind.OUT_OF_RANGE)

    total_usage = (
        ((cylinder.bump_time_min * tests * cylinder.flow_rate) +
         (cylinder.cal_time_min * calibrations * cylinder.flow_rate)) *
        instrument_count
    )
    liters = round_liters(total_usage)

    logger.debug("Usage for %s: tests=%d calibrations=%d instruments=%d -> %s L",
                 gas_type, tests, calibrations, instrument_count, liters)
    return UsageResult(liters=liters)
