"""Example: drive the service layer directly, without Flask.

Controllers are a thin layer; the rules live in the services, so a script
can mark a guest in and read the live board with nothing but a container.
"""

import importlib

from dotenv import load_dotenv

from config import get_settings_module

from src.campus_attendance.campus_attendance.container import build_container


def main():
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, secret_key=settings.SECRET_KEY)

    login = container.auth_service.login("admin", "admin123")
    actor = container.auth_service.verify_token(login.token)

    guest = container.gate_service.mark_guest_entry(actor, name="Visiting Lecturer", purpose="Seminar")
    print("guest in:", guest)

    live = container.report_service.live(actor)
    print("on campus:", len(live.snapshot.active_staff), "staff,", len(live.snapshot.active_guests), "guests")
    print("parking:", live.parking)


if __name__ == "__main__":
    main()
