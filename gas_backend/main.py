import logging
from typing import List

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.models import CylinderOut, UsageCalcRequest, UsageCalcResponse
from app.core.catalog import Catalog, build_catalog
from app.core.usage import ErrorKind, calculate_usage

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger("gas_calculator")

app = FastAPI(
    title=settings.APP_NAME,
    description="Calibration gas usage estimator",
    version=settings.VERSION,
)

# 目录只构建一次，通过依赖注入传给各接口
app.state.catalog = build_catalog()
logger.info("%s %s ready (%d cylinder types)", settings.APP_NAME, settings.VERSION,
            len(app.state.catalog))

# === 跨域配置 ===
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_catalog(request: Request) -> Catalog:
    return request.app.state.catalog


@app.get("/")
def read_root():
    return {"status": "System Online", "version": settings.VERSION}


@app.get("/cylinders", response_model=List[CylinderOut])
def list_cylinders(catalog: Catalog = Depends(get_catalog)):
    """下拉框数据，保持目录顺序"""
    return [record.to_dict() for record in catalog]


@app.get("/cylinders/{gas_type}", response_model=CylinderOut)
def get_cylinder(gas_type: str, catalog: Catalog = Depends(get_catalog)):
    record = catalog.get(gas_type)
    if record is None:
        raise HTTPException(status_code=404, detail=ErrorKind.UNKNOWN_GAS_TYPE.message)
    return record.to_dict()


@app.post("/calculate/usage", response_model=UsageCalcResponse)
def run_usage_calculation(data: UsageCalcRequest, catalog: Catalog = Depends(get_catalog)):
    """
    接收表单参数，计算月度用气量
    校验失败返回 422 和提示文字
    """
    result = calculate_usage(
        catalog,
        gas_type=data.gas_type,
        tests_per_month=data.tests_per_month,
        calibrations_per_month=data.calibrations_per_month,
        instruments=data.instruments,
        allow_out_of_range=settings.ALLOW_OUT_OF_RANGE,
    )

    response = {"input_echo": data.model_dump(), **result.to_dict()}
    if not result.ok:
        return JSONResponse(status_code=422, content=response)
    return response


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
