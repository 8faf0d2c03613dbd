# app/core/catalog.py
import logging
from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Tuple

from app.core.constants import CYLINDER_DB, FLOW_UNIT
from app.core.labels import parse_gas_label

logger = logging.getLogger(__name__)


class CatalogError(ValueError):
    """气瓶表数据不合法 (重复键、非正数参数、空组分)"""


@dataclass(frozen=True)
class CylinderRecord:
    gas_type: str                 # 原始标签，目录内唯一
    display_name: str
    components: Tuple[str, ...]
    bump_time_min: float          # 冲击测试时间 (min)
    cal_time_min: float           # 标定时间 (min)
    flow_rate: float              # 流量 (L/min)

    def properties_summary(self) -> str:
        """前端 "Selected Gas Properties" 一行文字"""
        return (
            f"Bump Test Time: {_fmt(self.bump_time_min)} min | "
            f"Calibration Time: {_fmt(self.cal_time_min)} min | "
            f"Flow Rate: {_fmt(self.flow_rate)} {FLOW_UNIT}"
        )

    def to_dict(self) -> dict:
        return {
            "gas_type": self.gas_type,
            "display_name": self.display_name,
            "components": list(self.components),
            "bump_time_min": self.bump_time_min,
            "cal_time_min": self.cal_time_min,
            "flow_rate": self.flow_rate,
            "properties_summary": self.properties_summary(),
        }


def _fmt(value: float) -> str:
    # 2 -> "2", 2.15 -> "2.15"
    return f"{value:g}"


class Catalog:
    """
    只读气瓶目录
    启动时构建一次，之后按引用传给所有调用方
    """

    def __init__(self, records):
        self._records: Tuple[CylinderRecord, ...] = tuple(records)
        self._index: Dict[str, CylinderRecord] = {}
        for record in self._records:
            if record.gas_type in self._index:
                raise CatalogError(f"重复的气瓶类型: {record.gas_type}")
            self._index[record.gas_type] = record

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[CylinderRecord]:
        return iter(self._records)

    def __contains__(self, gas_type) -> bool:
        return gas_type in self._index

    def __getitem__(self, gas_type: str) -> CylinderRecord:
        return self._index[gas_type]

    def get(self, gas_type: str) -> Optional[CylinderRecord]:
        return self._index.get(gas_type)

    def gas_types(self) -> Tuple[str, ...]:
        return tuple(record.gas_type for record in self._records)


def _validate_record(record: CylinderRecord) -> None:
    for field in ("bump_time_min", "cal_time_min", "flow_rate"):
        value = getattr(record, field)
        if not value > 0:
            raise CatalogError(f"{record.gas_type}: {field} 必须为正数 (当前 {value})")
    if not record.components:
        raise CatalogError(f"{record.gas_type}: 组分列表为空")


def build_catalog(table: Optional[dict] = None) -> Catalog:
    """
    由气瓶数据库生成目录
    table 默认使用 CYLINDER_DB，测试时可以传入自定义表
    """
    table = CYLINDER_DB if table is None else table

    records = []
    for gas_type, params in table.items():
        parsed = parse_gas_label(gas_type)
        record = CylinderRecord(
            gas_type=gas_type,
            display_name=parsed.display_name,
            components=parsed.components,
            bump_time_min=params["bumpTimeMin"],
            cal_time_min=params["calTimeMin"],
            flow_rate=params["flowRate"],
        )
        _validate_record(record)
        records.append(record)

    catalog = Catalog(records)
    logger.info("Cylinder catalog built with %d records", len(catalog))
    return catalog
