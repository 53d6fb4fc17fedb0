"""
렌터카 원장 예외 정의

API 계층은 이 예외들을 잡아서 사용자용 JSON 응답으로 변환한다.
"""


class RentalError(Exception):
    """렌터카 원장 기본 예외"""

    def __init__(self, message: str = '렌터카 처리 중 오류가 발생했습니다.'):
        self.message = message
        super().__init__(self.message)


class NotFoundError(RentalError, LookupError):
    """식별자에 해당하는 대상이 없음"""


class VehicleNotFoundError(NotFoundError):
    """차량 ID로 차량을 찾을 수 없음"""

    def __init__(self, vehicle_id: str):
        self.vehicle_id = vehicle_id
        super().__init__(f'차량을 찾을 수 없습니다: {vehicle_id}')


class CustomerNotFoundError(NotFoundError):
    """고객 ID로 고객을 찾을 수 없음"""

    def __init__(self, customer_id: str):
        self.customer_id = customer_id
        super().__init__(f'고객을 찾을 수 없습니다: {customer_id}')


class VehicleNotAvailableError(RentalError):
    """이미 대여중인 차량에 대여 시도"""

    def __init__(self, vehicle_id: str):
        self.vehicle_id = vehicle_id
        super().__init__(f'{vehicle_id} 차량은 이미 대여중입니다.')


class InvalidInputError(RentalError, ValueError):
    """잘못된 생성 인자 (빈 ID/이름, 0 이하 가격/일수 등)"""


class LedgerInconsistencyError(RentalError, RuntimeError):
    """차량 상태와 활성 대여 기록이 서로 맞지 않음 (불변식 위반)"""
