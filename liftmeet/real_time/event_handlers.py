"""
WebSocket event handlers for live competition-day features
"""
from flask_socketio import emit
from liftmeet.extensions import db, socketio
from liftmeet.models import Flight
from .websocket import competition_realtime
from ..utils.flight_status import calculate_flight_status
import logging

logger = logging.getLogger(__name__)


def register_all_handlers():
    """Register all WebSocket event handlers"""
    competition_realtime.register_handlers()
    register_flight_handlers()


def register_flight_handlers():
    """Read-only flight queries over the socket"""

    @socketio.on('request_flight_status')
    def handle_request_flight_status(data):
        try:
            flight_id = int((data or {}).get('flight_id'))
        except (TypeError, ValueError):
            emit('error', {'message': 'Flight ID required'})
            return

        if not db.session.get(Flight, flight_id):
            emit('error', {'message': 'Flight not found'})
            return

        status = calculate_flight_status(flight_id)
        emit('flight_status', {'flight_id': flight_id, 'status': status.value})
        logger.debug(f"Sent derived status {status.value} for flight {flight_id}")
