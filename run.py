import logging
import os
from liftmeet import create_app
from liftmeet.extensions import socketio

logger = logging.getLogger(__name__)

LOG_LEVEL = os.environ.get('FLASK_LOG_LEVEL', '').upper()
DEBUG_MODE_ON = True if LOG_LEVEL else False
app = create_app()

if __name__ == '__main__':
    logger.info(f"Log level set to {LOG_LEVEL}")
    # 0.0.0.0 so scoring tablets on the venue network can reach the server
    socketio.run(
        app,
        debug=DEBUG_MODE_ON,
        port=int(os.environ.get('PORT', 5001)),
        host='0.0.0.0',
        allow_unsafe_werkzeug=True,
    )
