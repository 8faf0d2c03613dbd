from http.server import BaseHTTPRequestHandler
import json
import logging
import sys
import os

# 添加后端模块路径
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..', 'gas_backend'))

from pydantic import ValidationError

from app.config import settings
from app.models import UsageCalcRequest
from app.core.catalog import build_catalog
from app.core.usage import calculate_usage

logger = logging.getLogger(__name__)

# 冷启动时构建一次
CATALOG = build_catalog()


class handler(BaseHTTPRequestHandler):
    def do_POST(self):
        try:
            content_length = int(self.headers.get('Content-Length', 0))
            body = self.rfile.read(max(content_length, 0))
            data = json.loads(body.decode('utf-8') or '{}')
            req = UsageCalcRequest(**data)
        except (ValueError, TypeError) as e:
            # ValidationError 也是 ValueError 的子类
            logger.info("Malformed usage request: %s", e)
            message = e.errors(include_url=False) if isinstance(e, ValidationError) else str(e)
            self._send_json(400, {"error": message})
            return

        # 调用算法核心
        result = calculate_usage(
            CATALOG,
            gas_type=req.gas_type,
            tests_per_month=req.tests_per_month,
            calibrations_per_month=req.calibrations_per_month,
            instruments=req.instruments,
            allow_out_of_range=settings.ALLOW_OUT_OF_RANGE,
        )

        response = {"input_echo": req.model_dump(), **result.to_dict()}
        self._send_json(200 if result.ok else 422, response)

    def do_OPTIONS(self):
        """处理 CORS 预检请求"""
        self.send_response(200)
        self.send_header('Access-Control-Allow-Origin', '*')
        self.send_header('Access-Control-Allow-Methods', 'POST, OPTIONS')
        self.send_header('Access-Control-Allow-Headers', 'Content-Type')
        self.end_headers()

    def _send_json(self, status, payload):
        self.send_response(status)
        self.send_header('Content-type', 'application/json')
        self.send_header('Access-Control-Allow-Origin', '*')
        self.end_headers()
        self.wfile.write(json.dumps(payload, default=str).encode())
