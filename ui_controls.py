# ui_controls.py
import tkinter as tk
from tkinter import ttk


def build_ui(app):
    app.columnconfigure(0, weight=1)
    app.rowconfigure(0, weight=1)

    main = ttk.Frame(app, padding=8)
    main.grid(row=0, column=0, sticky="nsew")
    main.rowconfigure(1, weight=1)
    main.columnconfigure(0, weight=1)

    # Top bar
    topbar = ttk.Frame(main)
    topbar.grid(row=0, column=0, sticky="ew")
    topbar.columnconfigure(0, weight=1)

    app.info_var = tk.StringVar(value="")
    ttk.Label(topbar, textvariable=app.info_var).grid(row=0, column=0, sticky="w")
    ttk.Button(topbar, text="Recenter", command=app.recenter_view).grid(row=0, column=1, sticky="e", padx=(8, 0))
    ttk.Button(topbar, text="Controls", command=app.show_controls).grid(row=0, column=2, sticky="e", padx=(8, 0))

    # Viewport
    app.viewport = app._create_viewport(main)
    app.viewport.grid(row=1, column=0, sticky="nsew", pady=(8, 0))
