"""
Socket.IO rooms for competition-day screens.
Scoring tablets, venue displays and spectators follow one competition each and
receive every flight and result change made through the HTTP API.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Optional, Set

from flask import request
from flask_socketio import emit, join_room, leave_room

from liftmeet.extensions import db, socketio
from liftmeet.models import Competition, Flight

logger = logging.getLogger(__name__)

ROLES = ("scorer", "display", "spectator")


@dataclass
class Follower:
    sid: str
    competition_id: Optional[int] = None
    role: str = "spectator"


class CompetitionRealTime:
    """Keeps the room membership of every connected screen"""

    def __init__(self):
        self.followers: Dict[str, Follower] = {}
        self.rooms: Dict[int, Set[str]] = {}

    def register_handlers(self):

        @socketio.on('connect')
        def handle_connect():
            self.followers[request.sid] = Follower(sid=request.sid)
            logger.info(f"Screen {request.sid} connected")
            emit('connection_established', {'client_id': request.sid})

        @socketio.on('disconnect')
        def handle_disconnect():
            follower = self.followers.pop(request.sid, None)
            if follower and follower.competition_id is not None:
                self._forget(follower)
            logger.info(f"Screen {request.sid} disconnected")

        @socketio.on('join_competition')
        def handle_join_competition(data):
            data = data or {}
            try:
                competition_id = int(data.get('competition_id'))
            except (TypeError, ValueError):
                emit('error', {'message': 'Competition ID required'})
                return

            role = data.get('role', 'spectator')
            if role not in ROLES:
                emit('error', {'message': f"Unknown role '{role}'"})
                return

            if not db.session.get(Competition, competition_id):
                emit('error', {'message': 'Competition not found'})
                return

            follower = self.followers.setdefault(request.sid, Follower(sid=request.sid))
            if follower.competition_id not in (None, competition_id):
                leave_room(self.room_name(follower.competition_id))
                self._forget(follower)

            join_room(self.room_name(competition_id))
            follower.competition_id = competition_id
            follower.role = role
            self.rooms.setdefault(competition_id, set()).add(request.sid)
            logger.info(f"Screen {request.sid} follows competition {competition_id} as {role}")

            emit('joined_competition', {
                'competition_id': competition_id,
                'role': role,
                'flights': self.flight_snapshot(competition_id),
            })

        @socketio.on('leave_competition')
        def handle_leave_competition(data):
            follower = self.followers.get(request.sid)
            if not follower or follower.competition_id is None:
                return

            competition_id = follower.competition_id
            leave_room(self.room_name(competition_id))
            self._forget(follower)
            emit('left_competition', {'competition_id': competition_id})

    def _forget(self, follower: Follower):
        members = self.rooms.get(follower.competition_id)
        if members is not None:
            members.discard(follower.sid)
            if not members:
                del self.rooms[follower.competition_id]
        follower.competition_id = None

    @staticmethod
    def room_name(competition_id):
        return f"competition_{competition_id}"

    @staticmethod
    def flight_snapshot(competition_id):
        """Current flights of a competition without their groups."""
        flights = (
            Flight.query.filter_by(competition_id=competition_id)
            .order_by(Flight.number.asc())
            .all()
        )
        return [f.to_dict(include_groups=False) for f in flights]

    def broadcast_to_competition(self, competition_id, event, data):
        # Called after the HTTP write has committed
        try:
            socketio.emit(event, data, to=self.room_name(competition_id))
            logger.debug(f"Broadcasted {event} to competition {competition_id}")
        except Exception:
            logger.exception(f"Failed to broadcast {event} to competition {competition_id}")

    def broadcast_flight_update(self, competition_id, flight_data):
        self.broadcast_to_competition(competition_id, 'flight_updated', flight_data)

    def broadcast_result_update(self, competition_id, result_data):
        self.broadcast_to_competition(competition_id, 'result_updated', result_data)

    def follower_count(self, competition_id=None):
        if competition_id is not None:
            return len(self.rooms.get(competition_id, ()))
        return len(self.followers)


competition_realtime = CompetitionRealTime()
