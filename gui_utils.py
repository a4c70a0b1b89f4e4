import tkinter as tk
from tkinter import messagebox

import customtkinter as ctk

from notifications import Notifier


class MessageBoxNotifier(Notifier):
    def __init__(self, parent=None):
        self.parent = parent

    def success(self, message):
        messagebox.showinfo("Success", message, parent=self.parent)

    def error(self, message):
        messagebox.showerror("Error", message, parent=self.parent)


class PhoneDialog(ctk.CTkToplevel):
    """Modal M-Pesa phone prompt with an on-screen number pad for touch tills."""

    def __init__(self, master, title="M-Pesa Payment"):
        super().__init__(master)
        self.title(title)
        self.geometry("300x460")
        self.resizable(False, False)
        self.value = None

        ctk.CTkLabel(self, text="Enter M-Pesa phone number\n(254XXXXXXXXX):", font=("Arial", 14)).pack(pady=(12, 4))
        self.entry = ctk.CTkEntry(self, font=("Arial", 18, "bold"), width=240)
        self.entry.pack(pady=6)
        self.entry.focus_set()

        pad = ctk.CTkFrame(self)
        pad.pack(pady=5)
        btn_style = {"font": ("Arial", 14), "width": 60, "height": 60}
        keys = [["1", "2", "3"], ["4", "5", "6"], ["7", "8", "9"], ["⌫", "0", "OK"]]
        for r, row in enumerate(keys):
            for c, key in enumerate(row):
                ctk.CTkButton(pad, text=key, command=lambda k=key: self.on_key_press(k), **btn_style).grid(row=r, column=c, padx=2, pady=2)

        ctk.CTkButton(self, text="Cancel", fg_color="gray40", command=self.destroy).pack(pady=8)
        self.bind("<Return>", lambda e: self.on_key_press("OK"))
        self.bind("<Escape>", lambda e: self.destroy())

        self.transient(master)
        self.grab_set()

    def on_key_press(self, key):
        if key == "⌫":
            current = self.entry.get()
            if current:
                self.entry.delete(len(current) - 1, tk.END)
        elif key == "OK":
            self.value = self.entry.get().strip()
            self.destroy()
        else:
            self.entry.insert(tk.END, key)


def ask_phone_number(master):
    dialog = PhoneDialog(master)
    master.wait_window(dialog)
    return dialog.value
