import logging

import customtkinter as ctk

from api import PosApi
from config import load_config
from gui_dashboard import DashboardView
from gui_pos import PosView
from logging_config import configure_logging

log = logging.getLogger(__name__)


class App(ctk.CTk):
    def __init__(self, settings, api):
        super().__init__()
        self.settings = settings
        self.api = api
        self.title(f"{settings['SHOP_NAME']} - Point of Sale")
        self.geometry("1300x850")

        self.tabs = ctk.CTkTabview(self)
        self.tabs.pack(fill="both", expand=True, padx=10, pady=10)
        self.dashboard = DashboardView(self.tabs.add("Dashboard"), api)
        self.dashboard.pack(fill="both", expand=True)
        self.pos = PosView(self.tabs.add("POS"), api, settings)
        self.pos.pack(fill="both", expand=True)
        self.tabs.set("POS")

        self.bind("<F5>", lambda e: self.refresh_current())
        self.protocol("WM_DELETE_WINDOW", self.on_close)

    def refresh_current(self):
        if self.tabs.get() == "Dashboard":
            self.dashboard.refresh()
        else:
            self.pos.refresh()

    def on_close(self):
        self.api.close()
        self.destroy()


def main():
    try:
        settings = load_config()
    except (FileNotFoundError, ValueError, KeyError) as e:
        raise SystemExit(f"Config error: {e}")
    configure_logging(settings["LOG_DIR"], settings["LOG_LEVEL"])
    log.info("Starting POS against %s", settings["API_URL"])

    ctk.set_appearance_mode(settings["APPEARANCE_MODE"])
    ctk.set_default_color_theme("green")
    api = PosApi(settings["API_URL"], token=settings["API_TOKEN"], timeout=settings["REQUEST_TIMEOUT"])
    app = App(settings, api)
    app.mainloop()


if __name__ == "__main__":
    main()
