import customtkinter as ctk
from tkinter import ttk

from dashboard import load_stats, recent_order_rows, stat_cards, today_summary
from models import DashboardStats
from tasks import BackgroundTasks


class DashboardView(ctk.CTkFrame):
    def __init__(self, master, api):
        super().__init__(master)
        self.api = api
        self.tasks = BackgroundTasks(self)
        self.card_labels = {}
        self.today_labels = {}
        self.build_ui()
        self.render(DashboardStats.empty())
        self.refresh()

    def build_ui(self):
        ctk.CTkLabel(self, text="Dashboard", font=("Arial", 22, "bold")).pack(anchor="w", padx=10, pady=(10, 0))
        ctk.CTkLabel(self, text="Welcome to your POS dashboard", font=("Arial", 13)).pack(anchor="w", padx=10)

        cards = ctk.CTkFrame(self)
        cards.pack(fill="x", padx=10, pady=10)
        colors = ["#2E8B57", "#1E6FB8", "#7B4FBF", "#C0392B"]
        for col, ((name, _), color) in enumerate(zip(stat_cards(None), colors)):
            cards.columnconfigure(col, weight=1)
            card = ctk.CTkFrame(cards, fg_color=color)
            card.grid(row=0, column=col, padx=5, pady=5, sticky="nsew")
            ctk.CTkLabel(card, text=name, font=("Arial", 13), text_color="white").pack(anchor="w", padx=10, pady=(8, 0))
            value = ctk.CTkLabel(card, text="", font=("Arial", 22, "bold"), text_color="white")
            value.pack(anchor="w", padx=10, pady=(0, 10))
            self.card_labels[name] = value

        today = ctk.CTkFrame(self)
        today.pack(fill="x", padx=10, pady=5)
        ctk.CTkLabel(today, text="Today's Performance", font=("Arial", 16, "bold")).grid(row=0, column=0, columnspan=2, sticky="w", padx=10, pady=5)
        for col, (name, _) in enumerate(today_summary(None)):
            today.columnconfigure(col, weight=1)
            ctk.CTkLabel(today, text=name, font=("Arial", 13)).grid(row=1, column=col, sticky="w", padx=10)
            value = ctk.CTkLabel(today, text="", font=("Arial", 26, "bold"))
            value.grid(row=2, column=col, sticky="w", padx=10, pady=(0, 10))
            self.today_labels[name] = value

        ctk.CTkLabel(self, text="Recent Orders", font=("Arial", 16, "bold")).pack(anchor="w", padx=10, pady=(10, 0))
        columns = ("Order ID", "Amount", "Status", "Date")
        self.orders_tree = ttk.Treeview(self, columns=columns, show="headings", height=10)
        for col in columns:
            self.orders_tree.heading(col, text=col)
            self.orders_tree.column(col, width=150)
        self.orders_tree.pack(fill="both", expand=True, padx=10, pady=5)
        self.empty_label = ctk.CTkLabel(self, text="No recent orders", text_color="gray50")

    def refresh(self):
        self.tasks.submit(lambda: load_stats(self.api), on_done=self.render)

    def render(self, stats):
        for name, value in stat_cards(stats):
            self.card_labels[name].configure(text=value)
        for name, value in today_summary(stats):
            self.today_labels[name].configure(text=value)
        self.orders_tree.delete(*self.orders_tree.get_children())
        rows = recent_order_rows(stats)
        for row in rows:
            self.orders_tree.insert("", "end", values=row)
        if rows:
            self.empty_label.pack_forget()
        else:
            self.empty_label.pack(pady=4)

    def destroy(self):
        self.tasks.cancel()
        super().destroy()
