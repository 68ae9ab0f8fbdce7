# backend/stockroom/config.py
from __future__ import annotations
import os


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/stockroom.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL",
        "sqlite:///stockroom.sqlite3",
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # "Today" on the dashboard is a calendar day in this zone
    STORE_TIMEZONE = os.environ.get("STORE_TIMEZONE", "UTC")

    CURRENCY_SYMBOL = os.environ.get("CURRENCY_SYMBOL", "R$")
    DEFAULT_MIN_STOCK_THRESHOLD = int(os.environ.get("DEFAULT_MIN_STOCK_THRESHOLD", "3"))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Browser front-ends allowed to call the API (comma-separated)
    CORS_ORIGINS = tuple(
        o.strip()
        for o in os.environ.get("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(",")
        if o.strip()
    )
