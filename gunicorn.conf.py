"""Gunicorn settings for the RoomBoard admin console."""
import os

bind = os.environ.get('ROOMBOARD_BIND', '127.0.0.1:8000')

# SQLite allows one writer at a time, keep the pool small
workers = int(os.environ.get('ROOMBOARD_WORKERS', '2'))
threads = 2
worker_class = 'gthread'

timeout = 30

accesslog = '-'
errorlog = '-'
loglevel = os.environ.get('ROOMBOARD_LOG_LEVEL', 'info')

proc_name = 'roomboard'
