"""
렌터카 원장 서비스 (요금 정책, 원장, 기본 차량 구성)
"""
