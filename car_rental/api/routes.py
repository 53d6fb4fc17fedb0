"""
REST API 엔드포인트
"""

from flask import jsonify, request, current_app
from car_rental.api import bp
from car_rental.events import broadcast_rental_event
from car_rental.exceptions import (
    InvalidInputError, LedgerInconsistencyError, NotFoundError, VehicleNotAvailableError
)


def _ledger():
    """현재 앱의 RentalLedger"""
    return current_app.ledger


def _error(message, status_code):
    """실패 응답"""
    return jsonify({
        'success': False,
        'error': message
    }), status_code


def _parse_days(value):
    """요청 값에서 대여 일수 파싱

    Raises:
        InvalidInputError: 숫자가 아니거나 허용 범위를 벗어난 경우
    """
    if isinstance(value, bool):
        raise InvalidInputError('대여 일수는 숫자로 입력해주세요.')
    try:
        days = int(str(value).strip())
    except (TypeError, ValueError):
        raise InvalidInputError('대여 일수는 숫자로 입력해주세요.')

    max_days = current_app.config['MAX_RENTAL_DAYS']
    if days <= 0 or days > max_days:
        raise InvalidInputError(f'대여 일수는 1일 ~ {max_days}일 사이여야 합니다.')
    return days


def _json_body():
    """요청 JSON 본문 (객체만 허용, 본문이 없으면 빈 dict)

    Raises:
        InvalidInputError: JSON 객체가 아닌 경우
    """
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidInputError('요청 본문은 JSON 객체여야 합니다.')
    return data


def _text_field(data, key):
    """문자열 필드 (없으면 빈 문자열)

    Raises:
        InvalidInputError: 문자열이 아닌 값인 경우
    """
    value = data.get(key)
    if value is None:
        return ''
    if not isinstance(value, str):
        raise InvalidInputError(f'{key} 값은 문자열이어야 합니다.')
    return value


def _quote_to_dict(quote):
    """요금 미리보기 직렬화 (Decimal -> float)"""
    return {
        'vehicle_id': quote['vehicle_id'],
        'display_name': quote['display_name'],
        'days': quote['days'],
        'base_price_per_day': float(quote['base_price_per_day']),
        'subtotal': float(quote['subtotal']),
        'discount_percent': quote['discount_percent'],
        'total_price': float(quote['total_price'])
    }


@bp.route('/health')
def health_check():
    """헬스 체크"""
    ledger = _ledger()
    try:
        ledger.verify_consistency()
        consistent = True
    except LedgerInconsistencyError as e:
        current_app.logger.error(f'원장 불일치 감지: {e.message}')
        consistent = False

    return jsonify({
        'status': 'healthy' if consistent else 'degraded',
        'version': '1.0.0',
        'timestamp': current_app.config.get('START_TIME', ''),
        'consistent': consistent,
        'stats': ledger.stats()
    })


@bp.route('/vehicles')
def get_vehicles():
    """차량 목록 조회"""
    status = request.args.get('status', 'all')  # available, all

    if status == 'available':
        vehicles = _ledger().list_available_vehicles()
    elif status == 'all':
        vehicles = _ledger().list_all_vehicles()
    else:
        return _error(f'알 수 없는 상태 필터입니다: {status}', 400)

    return jsonify({
        'success': True,
        'vehicles': [vehicle.to_dict() for vehicle in vehicles],
        'count': len(vehicles)
    })


@bp.route('/vehicles/<vehicle_id>')
def get_vehicle(vehicle_id):
    """차량 정보 조회"""
    try:
        vehicle = _ledger().find_vehicle(vehicle_id)
    except NotFoundError as e:
        return _error(e.message, 404)

    return jsonify({
        'success': True,
        'vehicle': vehicle.to_dict()
    })


@bp.route('/vehicles/<vehicle_id>/quote')
def quote_vehicle(vehicle_id):
    """대여 요금 미리보기"""
    try:
        vehicle = _ledger().find_vehicle(vehicle_id)
        days = _parse_days(request.args.get('days'))
        quote = vehicle.quote(days)
    except NotFoundError as e:
        return _error(e.message, 404)
    except InvalidInputError as e:
        return _error(e.message, 400)

    return jsonify({
        'success': True,
        'available': vehicle.available,
        'quote': _quote_to_dict(quote)
    })


@bp.route('/customers', methods=['GET'])
def get_customers():
    """고객 목록 조회"""
    customers = _ledger().list_customers()
    return jsonify({
        'success': True,
        'customers': [customer.to_dict() for customer in customers],
        'count': len(customers)
    })


@bp.route('/customers', methods=['POST'])
def register_customer():
    """고객 등록"""
    try:
        data = _json_body()
        customer = _ledger().register_customer(_text_field(data, 'name'),
                                               _text_field(data, 'phone'))
    except InvalidInputError as e:
        return _error(e.message, 400)

    return jsonify({
        'success': True,
        'customer': customer.to_dict(),
        'message': f'{customer.name}님이 등록되었습니다. (고객 ID: {customer.id})'
    }), 201


@bp.route('/customers/<customer_id>')
def get_customer(customer_id):
    """고객 정보 조회 (대여 이력 포함)"""
    try:
        customer = _ledger().get_customer(customer_id)
    except NotFoundError as e:
        return _error(e.message, 404)

    return jsonify({
        'success': True,
        'customer': customer.to_dict(include_history=True)
    })


@bp.route('/vehicles/<vehicle_id>/rent', methods=['POST'])
def rent_vehicle(vehicle_id):
    """차량 대여

    기존 고객은 customer_id, 신규 고객은 name/phone 으로 요청한다.
    신규 고객은 대여가 성립할 때만 등록된다.
    """
    ledger = _ledger()

    try:
        data = _json_body()
        days = _parse_days(data.get('days'))
        vehicle = ledger.find_vehicle(vehicle_id)

        customer_id = _text_field(data, 'customer_id')
        if customer_id:
            customer = ledger.get_customer(customer_id)
            rental = ledger.rent_vehicle(vehicle, customer, days)
        else:
            rental = ledger.rent_to_new_customer(vehicle, _text_field(data, 'name'),
                                                 _text_field(data, 'phone'), days)

    except NotFoundError as e:
        return _error(e.message, 404)
    except VehicleNotAvailableError as e:
        return _error(e.message, 409)
    except InvalidInputError as e:
        return _error(e.message, 400)
    except Exception as e:
        current_app.logger.error(f'차량 대여 오류: {e}')
        return _error('차량 대여 중 오류가 발생했습니다.', 500)

    broadcast_rental_event('rented', rental)

    return jsonify({
        'success': True,
        'rental': rental.to_dict(),
        'receipt': rental.to_receipt(),
        'discount_percent': vehicle.quote(days)['discount_percent'],
        'message': f'{vehicle.display_name} 대여가 완료되었습니다.'
    }), 201


@bp.route('/vehicles/<vehicle_id>/return', methods=['POST'])
def return_vehicle(vehicle_id):
    """차량 반납"""
    try:
        rental = _ledger().return_vehicle(vehicle_id)
    except NotFoundError as e:
        return _error(e.message, 404)
    except LedgerInconsistencyError as e:
        current_app.logger.error(f'차량 반납 원장 불일치: {e.message}')
        return _error(e.message, 500)

    if rental is None:
        return jsonify({
            'success': True,
            'returned': False,
            'rental': None,
            'message': '현재 대여중인 차량이 아닙니다.'
        })

    broadcast_rental_event('returned', rental)

    return jsonify({
        'success': True,
        'returned': True,
        'rental': rental.to_dict(),
        'receipt': rental.to_receipt(),
        'message': f'차량이 반납되었습니다. (반납자: {rental.customer.name}, '
                   f'총액: ${rental.total_price:.2f})'
    })


@bp.route('/rentals')
def get_rentals():
    """대여 기록 조회"""
    status = request.args.get('status', 'active')  # active, completed

    if status == 'active':
        rentals = _ledger().list_active_rentals()
    elif status == 'completed':
        rentals = _ledger().list_completed_rentals()
    else:
        return _error(f'알 수 없는 상태 필터입니다: {status}', 400)

    return jsonify({
        'success': True,
        'rentals': [rental.to_dict() for rental in rentals],
        'count': len(rentals)
    })
