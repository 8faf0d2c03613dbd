# app/models.py
from typing import List, Optional

from pydantic import BaseModel, field_validator


# 定义前端发过来的数据格式
class UsageCalcRequest(BaseModel):
    gas_type: Optional[str] = ""               # 气瓶类型 (原始标签)
    tests_per_month: Optional[str] = ""        # 每月冲击测试次数
    calibrations_per_month: Optional[str] = "" # 每月标定次数
    instruments: Optional[str] = ""            # 仪器数量

    @field_validator("tests_per_month", "calibrations_per_month", "instruments", mode="before")
    @classmethod
    def as_form_text(cls, value):
        # 数字、布尔等一律转成表单文本，由计算核心判断能否解析
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)


class CylinderOut(BaseModel):
    gas_type: str
    display_name: str
    components: List[str]
    bump_time_min: float
    cal_time_min: float
    flow_rate: float
    properties_summary: str


class UsageError(BaseModel):
    kind: str
    message: str


class UsageCalcResponse(BaseModel):
    input_echo: UsageCalcRequest
    usage_liters: Optional[float] = None
    formatted: Optional[str] = None
    error: Optional[UsageError] = None
