"""
WebSocket 이벤트 핸들러

핸들러는 create_app() 에서 앱별 SocketIO 인스턴스에 등록된다.
"""

from flask_socketio import emit, join_room, leave_room
from flask import request, current_app

DASHBOARD_ROOM = 'dashboard'


def handle_connect(auth=None):
    """클라이언트 연결"""
    client_id = request.sid
    current_app.logger.info(f'클라이언트 연결: {client_id}')

    # 대시보드 방에 참가
    join_room(DASHBOARD_ROOM)

    emit('connected', {
        'status': 'success',
        'client_id': client_id,
        'message': '렌터카 원장에 연결되었습니다.'
    })


def handle_disconnect(reason=None):
    """클라이언트 연결 해제"""
    client_id = request.sid
    current_app.logger.info(f'클라이언트 연결 해제: {client_id}')

    leave_room(DASHBOARD_ROOM)


def handle_request_fleet():
    """차량/활성 대여 현황 요청"""
    ledger = current_app.ledger
    emit('fleet_snapshot', {
        'vehicles': [vehicle.to_dict() for vehicle in ledger.list_all_vehicles()],
        'active_rentals': [rental.to_dict() for rental in ledger.list_active_rentals()],
        'stats': ledger.stats()
    })


def handle_heartbeat():
    """하트비트 (연결 상태 확인)"""
    emit('heartbeat_response', {
        'timestamp': current_app.config.get('START_TIME', ''),
        'status': 'alive'
    })


def register_socketio_handlers(socketio):
    """SocketIO 인스턴스에 이벤트 핸들러 등록"""
    socketio.on_event('connect', handle_connect)
    socketio.on_event('disconnect', handle_disconnect)
    socketio.on_event('request_fleet', handle_request_fleet)
    socketio.on_event('heartbeat', handle_heartbeat)


def broadcast_rental_event(event_type, rental):
    """대여/반납 이벤트를 현재 앱의 대시보드에 브로드캐스트

    Args:
        event_type: 'rented' 또는 'returned'
        rental: RentalRecord
    """
    socketio = current_app.extensions['socketio']
    socketio.emit('rental_event', {
        'event_type': event_type,
        'rental': rental.to_dict()
    }, to=DASHBOARD_ROOM)
