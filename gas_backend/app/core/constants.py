# app/core/constants.py

# === 气瓶数据库 (Single Source of Truth) ===
# 顺序即下拉框顺序，不要随意调整
CYLINDER_DB = {
    "3 in 1 (O2,LEL,CO)": {
        "bumpTimeMin": 0.5,      # 冲击测试时间 (min)
        "calTimeMin": 2,         # 标定时间 (min)
        "flowRate": 0.5          # 流量 (L/min)
    },
    "3 in 1 (O2,LEL,H2S)": {
        "bumpTimeMin": 0.5,
        "calTimeMin": 2,
        "flowRate": 0.5
    },
    "4 in 1 (O2,LEL,CO,H2S)": {
        "bumpTimeMin": 0.4,
        "calTimeMin": 1.5,
        "flowRate": 0.5
    },
    "4 in 1 (O2,LEL,CO,CO2)": {
        "bumpTimeMin": 0.5,
        "calTimeMin": 2.15,
        "flowRate": 0.5
    },
    "5 in 1 (O2,LEL,CO,H2S,CO2)": {
        "bumpTimeMin": 0.5,
        "calTimeMin": 2.15,
        "flowRate": 0.5
    },
    "5 in 1 (O2,LEL,CO,H2S,SO2)": {
        "bumpTimeMin": 0.75,
        "calTimeMin": 2.5,
        "flowRate": 0.5
    },
    "Ammonia (NH3)": {
        "bumpTimeMin": 1,
        "calTimeMin": 3,
        "flowRate": 0.5
    },
    "Carbon Dioxide (CO2)": {
        "bumpTimeMin": 0.5,
        "calTimeMin": 1.5,
        "flowRate": 0.5
    },
    "Carbon Monoxide (CO)": {
        "bumpTimeMin": 0.4,
        "calTimeMin": 1.5,
        "flowRate": 0.5
    },
    "Chlorine (Cl2)": {
        "bumpTimeMin": 3,        # 氯气传感器响应慢
        "calTimeMin": 6,
        "flowRate": 0.5
    },
}

# 流量单位 (Liters Per Minute)
FLOW_UNIT = "LPM"
VOLUME_UNIT = "Liters"
