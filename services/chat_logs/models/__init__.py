from .chat_log import ChatLog
