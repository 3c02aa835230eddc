"""
Fleet header keyword mappings from spreadsheet/PDF/Word column headers to the
standardized vehicle schema.

Each entry is a versioned keyword dictionary. Keywords are matched as
substrings of the header cell after lowercasing and removing all whitespace,
so every keyword here is stored in that same form.
"""

FLEET_KEYWORD_MAPPINGS = [
    {
        "id": "fleet_keywords_v1",
        "metadata": {
            "version": 1,
            "source_name": "Government fleet asset registers",
            "languages": ["th", "en"],
            "notes": "Bilingual header vocabulary seen in provincial asset sheets and scanned PDF registers",
        },
        "fields": {
            "plate_no": [
                "ทะเบียน", "เลขทะเบียน", "หมายเลขโล่",
                "plate", "registration", "no.", "no", "vehicleno", "id", "license",
            ],
            "vehicle_type": [
                "ประเภท", "ชนิด", "ลักษณะ",
                "category", "type", "kind", "class", "vehicle",
            ],
            "brand": [
                "ยี่ห้อ", "รุ่น", "แบบ",
                "brand", "model", "manufacturer", "maker",
            ],
            "engine_no": [
                "เลขเครื่อง", "หมายเลขเครื่อง",
                "engine", "chassis", "vin", "serial", "number",
            ],
            "asset_value": [
                "ราคา", "มูลค่า", "งบประมาณ", "ทุน", "บาท",
                "value", "price", "cost", "amount", "assetvalue", "budget",
            ],
            "department": [
                "หน่วยงาน", "สังกัด", "แผนก", "กอง", "กำกับการ",
                "unit", "dept", "department", "office", "section", "division",
            ],
            "condition_status": [
                "สถานะ", "สภาพ", "ความพร้อม",
                "status", "condition", "readiness", "state", "remark", "หมายเหตุ",
            ],
            "purchase_year": [
                "ปี", "พศ", "คศ", "จัดซื้อ",
                "acquired", "purchase", "year", "date", "acquiredyear", "fiscal",
            ],
        },
    },
]
