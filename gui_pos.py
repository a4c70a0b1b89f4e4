import logging
import tkinter as tk
from tkinter import ttk

import customtkinter as ctk

from cart import Cart, add_to_cart, clear_cart, remove_from_cart, set_quantity
from catalog import filter_products, find_product
from checkout import CATALOG_FAILED, ORDER_FAILED, CheckoutOrchestrator, PaymentMethod
from currency import format_kes
from gui_utils import MessageBoxNotifier, ask_phone_number
from print_utils import build_receipt, print_receipt
from tasks import BackgroundTasks, UiThreadNotifier

log = logging.getLogger(__name__)

ALL_CATEGORIES = "All Categories"


class PosView(ctk.CTkFrame):
    def __init__(self, master, api, settings):
        super().__init__(master)
        self.api = api
        self.settings = settings
        self.tasks = BackgroundTasks(self)
        self.notifier = MessageBoxNotifier(self)
        self.orchestrator = CheckoutOrchestrator(api, UiThreadNotifier(self.tasks, self.notifier))

        self.products = []
        self.categories = []
        self.cart = Cart()
        self.processing = False

        self.search_var = tk.StringVar()
        self.category_var = tk.StringVar(value=ALL_CATEGORIES)
        self.print_receipt_var = tk.BooleanVar(value=bool(settings.get("PRINT_RECEIPT")))

        self.build_ui()
        self.search_var.trace_add("write", lambda *args: self.render_products())
        self.refresh()

    # ---------- LAYOUT ----------
    def build_ui(self):
        self.columnconfigure(0, weight=3)
        self.columnconfigure(1, weight=2)
        self.rowconfigure(0, weight=1)

        left = ctk.CTkFrame(self)
        left.grid(row=0, column=0, sticky="nsew", padx=(10, 5), pady=10)
        ctk.CTkLabel(left, text="Point of Sale", font=("Arial", 22, "bold")).pack(anchor="w", padx=10, pady=(10, 5))

        filter_frame = ctk.CTkFrame(left)
        filter_frame.pack(fill="x", padx=10, pady=5)
        ctk.CTkEntry(filter_frame, textvariable=self.search_var, placeholder_text="Search products...", font=("Arial", 15)).pack(side="left", fill="x", expand=True, padx=(0, 8))
        self.category_menu = ctk.CTkComboBox(filter_frame, variable=self.category_var, values=[ALL_CATEGORIES], command=lambda _: self.render_products(), state="readonly", width=200)
        self.category_menu.pack(side="right")

        style = ttk.Style()
        style.configure("Pos.Treeview", font=("Arial", 14), rowheight=30)
        style.configure("Pos.Treeview.Heading", font=("Arial", 14, "bold"))

        columns = ("ID", "Name", "Price", "Stock")
        self.product_tree = ttk.Treeview(left, columns=columns, show="headings", style="Pos.Treeview")
        for col, width in zip(columns, (50, 280, 120, 80)):
            self.product_tree.heading(col, text=col)
            self.product_tree.column(col, width=width)
        self.product_tree.pack(fill="both", expand=True, padx=10, pady=10)
        self.product_tree.bind("<Double-1>", self.on_product_activate)
        self.product_tree.bind("<Return>", self.on_product_activate)
        self.status_label = ctk.CTkLabel(left, text="Loading products...", text_color="gray50")
        self.status_label.pack(pady=(0, 8))

        right = ctk.CTkFrame(self)
        right.grid(row=0, column=1, sticky="nsew", padx=(5, 10), pady=10)
        ctk.CTkLabel(right, text="Cart", font=("Arial", 20, "bold")).pack(anchor="w", padx=10, pady=(10, 5))

        cart_columns = ("Name", "Price", "Qty", "Total")
        self.cart_tree = ttk.Treeview(right, columns=cart_columns, show="headings", style="Pos.Treeview", height=10)
        for col, width in zip(cart_columns, (200, 100, 50, 110)):
            self.cart_tree.heading(col, text=col)
            self.cart_tree.column(col, width=width)
        self.cart_tree.pack(fill="both", expand=True, padx=10, pady=5)

        qty_frame = ctk.CTkFrame(right)
        qty_frame.pack(fill="x", padx=10, pady=2)
        self.cart_buttons = [
            ctk.CTkButton(qty_frame, text="-", width=50, command=lambda: self.change_selected_quantity(-1)),
            ctk.CTkButton(qty_frame, text="+", width=50, command=lambda: self.change_selected_quantity(1)),
            ctk.CTkButton(qty_frame, text="Remove", fg_color="#FF6347", command=self.remove_selected),
        ]
        self.cart_buttons[0].pack(side="left", padx=2)
        self.cart_buttons[1].pack(side="left", padx=2)
        self.cart_buttons[2].pack(side="right", padx=2)

        totals = ctk.CTkFrame(right)
        totals.pack(fill="x", padx=10, pady=8)
        self.label_subtotal = self._total_row(totals, "Subtotal:", 0)
        self.label_tax = self._total_row(totals, "VAT (16%):", 1)
        self.label_total = self._total_row(totals, "Total:", 2, font=("Arial", 20, "bold"))

        ctk.CTkCheckBox(right, text="Print receipt", variable=self.print_receipt_var).pack(anchor="w", padx=12, pady=4)

        self.pay_buttons = [
            ctk.CTkButton(right, text="Cash Payment", fg_color="#2E8B57", height=40, command=lambda: self.process_order(PaymentMethod.CASH)),
            ctk.CTkButton(right, text="M-Pesa Payment", fg_color="#3CB371", height=40, command=lambda: self.process_order(PaymentMethod.MPESA)),
            ctk.CTkButton(right, text="Card Payment", fg_color="#1E6FB8", height=40, command=lambda: self.process_order(PaymentMethod.CARD)),
        ]
        for btn in self.pay_buttons:
            btn.pack(fill="x", padx=10, pady=3)
        clear_btn = ctk.CTkButton(right, text="Clear Cart", fg_color="gray45", height=36, command=self.on_clear_cart)
        clear_btn.pack(fill="x", padx=10, pady=(3, 10))
        self.cart_buttons.append(clear_btn)

    def _total_row(self, parent, text, row, font=("Arial", 15)):
        parent.columnconfigure(1, weight=1)
        ctk.CTkLabel(parent, text=text, font=font).grid(row=row, column=0, sticky="w", padx=8)
        label = ctk.CTkLabel(parent, text=format_kes(0), font=font)
        label.grid(row=row, column=1, sticky="e", padx=8)
        return label

    # ---------- DATA ----------
    def refresh(self):
        self.tasks.submit(self.api.get_products, on_done=self.set_products, on_error=self.on_products_failed)
        self.tasks.submit(self.api.get_categories, on_done=self.set_categories, on_error=self.on_categories_failed)

    def set_products(self, products):
        self.products = products
        self.status_label.configure(text="")
        self.render_products()

    def on_products_failed(self, error):
        self.status_label.configure(text="")
        self.notifier.error(CATALOG_FAILED)

    def set_categories(self, categories):
        self.categories = categories
        self.category_menu.configure(values=[ALL_CATEGORIES] + [c.name for c in categories])

    def on_categories_failed(self, error):
        log.error("Failed to fetch categories: %s", error)

    def selected_category_id(self):
        name = self.category_var.get()
        for category in self.categories:
            if category.name == name:
                return category.id
        return None

    # ---------- RENDER ----------
    def render_products(self):
        self.product_tree.delete(*self.product_tree.get_children())
        for p in filter_products(self.products, self.search_var.get(), self.selected_category_id()):
            self.product_tree.insert("", "end", iid=str(p.id), values=(p.id, p.name, format_kes(p.price), p.stock_quantity))

    def render_cart(self):
        selected = self.cart_tree.focus()
        self.cart_tree.delete(*self.cart_tree.get_children())
        for item in self.cart:
            self.cart_tree.insert("", "end", iid=str(item.product.id), values=(
                item.product.name, format_kes(item.product.price), item.quantity, format_kes(item.line_total)))
        if selected and self.cart_tree.exists(selected):
            self.cart_tree.focus(selected)
            self.cart_tree.selection_set(selected)
        self.label_subtotal.configure(text=format_kes(self.cart.subtotal))
        self.label_tax.configure(text=format_kes(self.cart.tax))
        self.label_total.configure(text=format_kes(self.cart.total))

    # ---------- CART ----------
    def on_product_activate(self, event=None):
        if self.processing:
            return
        selected = self.product_tree.focus()
        if not selected:
            return
        product = find_product(self.products, int(selected))
        if product:
            self.cart = add_to_cart(self.cart, product, self.products, self.notifier)
            self.render_cart()

    def change_selected_quantity(self, delta):
        if self.processing:
            return
        selected = self.cart_tree.focus()
        if not selected:
            return
        item = self.cart.get(int(selected))
        if item:
            self.cart = set_quantity(self.cart, item.product.id, item.quantity + delta, self.products, self.notifier)
            self.render_cart()

    def remove_selected(self):
        if self.processing:
            return
        selected = self.cart_tree.focus()
        if selected:
            self.cart = remove_from_cart(self.cart, int(selected))
            self.render_cart()

    def on_clear_cart(self):
        if self.processing:
            return
        self.cart = clear_cart()
        self.render_cart()

    # ---------- CHECKOUT ----------
    def process_order(self, method):
        if self.processing:
            return
        self.set_processing(True)
        cart = self.cart
        self.tasks.submit(
            lambda: self.orchestrator.checkout(cart, method, prompt_phone=self.prompt_phone),
            on_done=lambda result: self.after_checkout(result, method),
            on_error=self.on_checkout_failed,
        )

    def on_checkout_failed(self, error):
        self.set_processing(False)
        self.notifier.error(ORDER_FAILED)

    def prompt_phone(self):
        # Called on the worker thread; the dialog itself runs on the Tk thread
        return self.tasks.call_in_ui(lambda: ask_phone_number(self.winfo_toplevel()))

    def after_checkout(self, result, method):
        self.set_processing(False)
        if result.products is not None:
            self.products = result.products
            self.render_products()
        if not result.ok:
            return
        self.cart = result.cart
        self.render_cart()
        if self.print_receipt_var.get():
            text = build_receipt(result.lines, result.order, method, shop_name=self.settings.get("SHOP_NAME", "POS"))
            self.tasks.submit(lambda: print_receipt(text))

    def set_processing(self, value):
        self.processing = value
        for btn in self.pay_buttons + self.cart_buttons:
            btn.configure(state="disabled" if value else "normal")

    def destroy(self):
        self.tasks.cancel()
        super().destroy()
