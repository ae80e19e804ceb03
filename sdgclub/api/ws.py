"""
WebSocket manager for the live check-in feed
"""

import json
import logging
from typing import Dict, List
from fastapi import APIRouter, WebSocket, WebSocketDisconnect, Depends, Query
from sqlalchemy.orm import Session

from sdgclub.core.db import get_db
from sdgclub.models import Event
from sdgclub.services.auth_service import AuthService

logger = logging.getLogger(__name__)

class WebSocketManager:
    """Manages WebSocket connections per event room"""

    def __init__(self):
        # event_id -> list of websockets
        self.active_connections: Dict[str, List[WebSocket]] = {}

    async def connect(self, websocket: WebSocket, event_id: str):
        """Accept WebSocket connection and add to event room"""
        await websocket.accept()

        if event_id not in self.active_connections:
            self.active_connections[event_id] = []

        self.active_connections[event_id].append(websocket)
        logger.info(f"WebSocket connected to event {event_id}. Total connections: {len(self.active_connections[event_id])}")

    def disconnect(self, websocket: WebSocket, event_id: str):
        """Remove WebSocket connection from event room"""
        if event_id in self.active_connections:
            try:
                self.active_connections[event_id].remove(websocket)
                logger.info(f"WebSocket disconnected from event {event_id}. Remaining connections: {len(self.active_connections[event_id])}")

                # Clean up empty rooms
                if not self.active_connections[event_id]:
                    del self.active_connections[event_id]
            except ValueError:
                # WebSocket was not in the list
                pass

    async def send_personal_message(self, message: dict, websocket: WebSocket):
        """Send message to specific WebSocket"""
        try:
            await websocket.send_text(json.dumps(message))
        except Exception as e:
            logger.error(f"Error sending personal message: {e}")

    async def broadcast_to_event(self, event_id: str, message: dict):
        """Broadcast message to all WebSockets following an event"""
        if event_id not in self.active_connections:
            logger.debug(f"No active connections for event {event_id}")
            return

        connections = self.active_connections[event_id].copy()

        disconnected = []
        for websocket in connections:
            try:
                await websocket.send_text(json.dumps(message))
            except Exception as e:
                logger.error(f"Error broadcasting to websocket: {e}")
                disconnected.append(websocket)

        for websocket in disconnected:
            self.disconnect(websocket, event_id)

    def get_connection_count(self, event_id: str) -> int:
        """Get number of active connections for an event"""
        return len(self.active_connections.get(event_id, []))

# Global WebSocket manager instance
websocket_manager = WebSocketManager()

# Router for WebSocket endpoints
router = APIRouter()

@router.websocket("/events/{event_id}/checkins")
async def checkin_feed(
    websocket: WebSocket,
    event_id: str,
    token: str = Query(""),
    db: Session = Depends(get_db)
):
    """Live check-in feed for admins running the check-in desk"""
    user = AuthService.resolve_token(db, token)
    if user is None or not user.is_admin:
        await websocket.close(code=4003, reason="Access denied")
        return

    event = db.query(Event).filter(Event.id == event_id).first()
    if not event:
        await websocket.close(code=4004, reason="Event not found")
        return

    await websocket_manager.connect(websocket, event_id)

    try:
        welcome_message = {
            "type": "connection",
            "message": f"Following check-ins for: {event.title}",
            "event_id": event_id,
            "connection_count": websocket_manager.get_connection_count(event_id)
        }
        await websocket_manager.send_personal_message(welcome_message, websocket)

        while True:
            data = await websocket.receive_text()
            try:
                client_message = json.loads(data)
            except json.JSONDecodeError:
                logger.warning(f"Invalid JSON received from WebSocket: {data}")
                continue

            if isinstance(client_message, dict) and client_message.get("type") == "ping":
                pong_message = {
                    "type": "pong",
                    "timestamp": client_message.get("timestamp")
                }
                await websocket_manager.send_personal_message(pong_message, websocket)

    except WebSocketDisconnect:
        pass
    finally:
        websocket_manager.disconnect(websocket, event_id)
