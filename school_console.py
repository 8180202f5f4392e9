#!/usr/bin/env python3
"""
Tkinter-based UI for the School Directory API.

Features:
    * Add a school through a validated form, with an optional image preview.
    * Browse every stored school and filter the list live by name, city or state.
    * Show each school's image, falling back to a placeholder when it cannot load.
"""

from __future__ import annotations

import base64
import threading
from typing import Any, Optional

import tkinter as tk
from tkinter import filedialog, messagebox, ttk
from tkinter.scrolledtext import ScrolledText

from school_directory.client import (
    DEFAULT_BASE_URL,
    DirectoryApi,
    SchoolDirectory,
    SchoolForm,
    SelectedImage,
    SubmissionOutcome,
    UnsupportedMediaType,
)
from school_directory.views import SCHOOL_FIELDS

FIELD_LABELS = {
    "name": "School name",
    "address": "Address",
    "city": "City",
    "state": "State",
    "contact": "Contact number",
    "email_id": "Email",
}
LIST_COLUMNS = ("name", "city", "state", "contact", "email_id")
PLACEHOLDER_TEXT = "No image"


class SchoolConsole(tk.Tk):
    def __init__(self) -> None:
        super().__init__()
        self.title("School Directory")
        self.minsize(920, 640)

        self.api = DirectoryApi(DEFAULT_BASE_URL)
        self.form = SchoolForm(self.api)
        self.directory = SchoolDirectory(self.api)

        self._preview_photo: Optional[tk.PhotoImage] = None
        self._detail_photo: Optional[tk.PhotoImage] = None

        self._build_ui()
        self.log(f"UI ready. Using API base URL: {self.api.base_url}")

    # --- UI construction -------------------------------------------------

    def _build_ui(self) -> None:
        self.columnconfigure(0, weight=1)
        self.rowconfigure(1, weight=1)

        config_frame = ttk.LabelFrame(self, text="Configuration")
        config_frame.grid(row=0, column=0, sticky="ew", padx=12, pady=(12, 6))
        config_frame.columnconfigure(1, weight=1)

        ttk.Label(config_frame, text="Base URL").grid(row=0, column=0, padx=6, pady=6)
        self.base_url_var = tk.StringVar(value=self.api.base_url)
        ttk.Entry(config_frame, textvariable=self.base_url_var).grid(
            row=0, column=1, sticky="ew", padx=(0, 6), pady=6
        )
        ttk.Button(
            config_frame,
            text="Apply",
            command=self._update_base_url,
            width=10,
        ).grid(row=0, column=2, padx=6, pady=6)

        self.notebook = ttk.Notebook(self)
        self.notebook.grid(row=1, column=0, sticky="nsew", padx=12, pady=6)

        self._build_form_tab()
        self._build_listing_tab()
        self.notebook.bind("<<NotebookTabChanged>>", self._on_tab_changed)

        self.status_var = tk.StringVar(value="")
        ttk.Label(self, textvariable=self.status_var).grid(
            row=2, column=0, sticky="w", padx=12
        )

        console_frame = ttk.LabelFrame(self, text="Console Output")
        console_frame.grid(row=3, column=0, sticky="nsew", padx=12, pady=(6, 12))
        console_frame.rowconfigure(0, weight=1)
        console_frame.columnconfigure(0, weight=1)

        self.output = ScrolledText(console_frame, wrap="word", height=8, state="disabled")
        self.output.grid(row=0, column=0, sticky="nsew", padx=6, pady=6)

    def _build_form_tab(self) -> None:
        frame = ttk.Frame(self.notebook)
        frame.columnconfigure(1, weight=1)
        self.form_tab = frame
        self.notebook.add(frame, text="Add School")

        self.field_vars: dict[str, tk.StringVar] = {}
        self.error_vars: dict[str, tk.StringVar] = {}
        for row, name in enumerate(SCHOOL_FIELDS):
            ttk.Label(frame, text=FIELD_LABELS[name]).grid(
                row=row * 2, column=0, padx=8, pady=(6, 0), sticky="w"
            )
            value_var = tk.StringVar()
            value_var.trace_add(
                "write",
                lambda *_args, field=name, var=value_var: self.form.set_field(field, var.get()),
            )
            ttk.Entry(frame, textvariable=value_var).grid(
                row=row * 2, column=1, sticky="ew", padx=(0, 8), pady=(6, 0)
            )
            error_var = tk.StringVar()
            ttk.Label(frame, textvariable=error_var, foreground="#EF4444").grid(
                row=row * 2 + 1, column=1, sticky="w", padx=(0, 8)
            )
            self.field_vars[name] = value_var
            self.error_vars[name] = error_var

        image_row = len(SCHOOL_FIELDS) * 2
        ttk.Label(frame, text="Image").grid(row=image_row, column=0, padx=8, pady=6, sticky="nw")
        image_frame = ttk.Frame(frame)
        image_frame.grid(row=image_row, column=1, sticky="ew", padx=(0, 8), pady=6)
        ttk.Button(image_frame, text="Choose…", command=self._choose_image).grid(
            row=0, column=0, sticky="w"
        )
        self.image_name_var = tk.StringVar(value="No file selected")
        ttk.Label(image_frame, textvariable=self.image_name_var).grid(
            row=0, column=1, sticky="w", padx=8
        )
        self.preview_label = ttk.Label(image_frame, text="")
        self.preview_label.grid(row=1, column=0, columnspan=2, sticky="w", pady=(6, 0))

        self.submit_button = ttk.Button(
            frame,
            text="Add School",
            command=self._on_submit,
            width=18,
        )
        self.submit_button.grid(row=image_row + 1, column=1, padx=8, pady=(12, 6), sticky="e")

    def _build_listing_tab(self) -> None:
        frame = ttk.Frame(self.notebook)
        frame.columnconfigure(0, weight=1)
        frame.rowconfigure(1, weight=1)
        self.listing_tab = frame
        self.notebook.add(frame, text="Schools")

        search_frame = ttk.Frame(frame)
        search_frame.grid(row=0, column=0, columnspan=2, sticky="ew", padx=8, pady=6)
        search_frame.columnconfigure(1, weight=1)
        ttk.Label(search_frame, text="Search").grid(row=0, column=0, padx=(0, 6))
        self.search_var = tk.StringVar()
        self.search_var.trace_add("write", self._on_search)
        ttk.Entry(search_frame, textvariable=self.search_var).grid(row=0, column=1, sticky="ew")
        self.count_var = tk.StringVar(value="")
        ttk.Label(search_frame, textvariable=self.count_var).grid(row=0, column=2, padx=(6, 0))
        self.retry_button = ttk.Button(
            search_frame, text="Try Again", command=self._load_listing, state="disabled"
        )
        self.retry_button.grid(row=0, column=3, padx=(6, 0))

        self.tree = ttk.Treeview(frame, columns=LIST_COLUMNS, show="headings", selectmode="browse")
        for column in LIST_COLUMNS:
            self.tree.heading(column, text=FIELD_LABELS[column])
            self.tree.column(column, width=140, stretch=True)
        self.tree.grid(row=1, column=0, sticky="nsew", padx=(8, 4), pady=6)
        self.tree.bind("<<TreeviewSelect>>", self._on_school_selected)

        detail = ttk.LabelFrame(frame, text="Details")
        detail.grid(row=1, column=1, sticky="ns", padx=(4, 8), pady=6)
        self.detail_image = ttk.Label(detail, text=PLACEHOLDER_TEXT, width=24, anchor="center")
        self.detail_image.grid(row=0, column=0, padx=6, pady=6)
        self.detail_var = tk.StringVar(value="")
        ttk.Label(detail, textvariable=self.detail_var, wraplength=220, justify="left").grid(
            row=1, column=0, padx=6, pady=6, sticky="w"
        )

    # --- Form actions ----------------------------------------------------

    def _update_base_url(self) -> None:
        new_url = self.base_url_var.get().strip().rstrip("/")
        if not new_url:
            messagebox.showerror("Invalid URL", "Base URL cannot be empty.")
            return
        self.api.base_url = new_url
        self.log(f"Base URL set to {new_url}")

    def _choose_image(self) -> None:
        path = filedialog.askopenfilename(
            title="Select school image",
            filetypes=(
                ("Image files", "*.png *.jpg *.jpeg *.gif *.webp *.bmp"),
                ("All files", "*.*"),
            ),
        )
        if not path:
            return
        try:
            image = self.form.select_file(SelectedImage.from_path(path))
        except UnsupportedMediaType as exc:
            messagebox.showwarning("Invalid file", str(exc))
            return
        except OSError as exc:
            messagebox.showerror("Image", f"Could not read {path}: {exc}")
            return

        self.image_name_var.set(image.filename)
        if image.oversized:
            self.set_status("Image is larger than 10MB; upload may be slow.")
        self._show_preview(image)

    def _show_preview(self, image: Optional[SelectedImage]) -> None:
        self._preview_photo = self._photo_from_bytes(image.data) if image else None
        if self._preview_photo is not None:
            self.preview_label.configure(image=self._preview_photo, text="")
        else:
            self.preview_label.configure(image="", text=image.filename if image else "")

    def _on_submit(self) -> None:
        if self.form.submitting:
            return
        self.submit_button.configure(state="disabled")
        self.set_status("Adding school...")

        def task() -> None:
            outcome = self.form.submit()
            self.after(0, lambda: self._handle_outcome(outcome))

        self._run_async(task)

    def _handle_outcome(self, outcome: SubmissionOutcome) -> None:
        self.submit_button.configure(state="normal")
        for name, var in self.error_vars.items():
            var.set(self.form.field_errors.get(name, ""))

        if not outcome.success:
            self.set_status(outcome.message)
            self.log(f"Submission failed: {outcome.message}")
            return

        self.set_status(outcome.message)
        self.log(f"School created with id {outcome.school_id}")
        for var in self.field_vars.values():
            var.set("")
        self.image_name_var.set("No file selected")
        self._show_preview(None)
        # A new record exists; the next visit to the listing fetches again.
        self.directory = SchoolDirectory(self.api)
        delay_ms = int((outcome.redirect_after or 0) * 1000)
        self.after(delay_ms, lambda: self.notebook.select(self.listing_tab))

    # --- Listing actions -------------------------------------------------

    def _on_tab_changed(self, _event: Any) -> None:
        if self.notebook.select() != str(self.listing_tab) or self.directory.loaded:
            return
        self._load_listing()

    def _load_listing(self) -> None:
        self.retry_button.configure(state="disabled")
        self.set_status("Loading schools...")
        directory = self.directory

        def task() -> None:
            directory.load()
            self.after(0, self._render_listing)

        self._run_async(task)

    def _on_search(self, *_args: Any) -> None:
        self.directory.search(self.search_var.get())
        self._render_listing()

    def _render_listing(self) -> None:
        if self.directory.error:
            self.set_status(self.directory.error)
            self.retry_button.configure(state="normal")
        elif self.directory.loaded:
            self.set_status("")

        schools = self.directory.search(self.search_var.get())
        self.tree.delete(*self.tree.get_children())
        for school in schools:
            self.tree.insert(
                "",
                "end",
                iid=str(school.id),
                values=tuple(getattr(school, column) for column in LIST_COLUMNS),
            )
        self.count_var.set(f"{len(schools)} of {len(self.directory.schools)}")

    def _on_school_selected(self, _event: Any) -> None:
        selection = self.tree.selection()
        if not selection:
            return
        school = next((s for s in self.directory.schools if str(s.id) == selection[0]), None)
        if school is None:
            return
        self.detail_var.set(
            f"{school.name}\n{school.address}\n{school.city}, {school.state}\n"
            f"{school.contact}\n{school.email_id}"
        )
        self.detail_image.configure(image="", text=PLACEHOLDER_TEXT)
        directory = self.directory

        def task() -> None:
            data = directory.image_bytes(school)
            self.after(0, lambda: self._show_detail_image(data))

        self._run_async(task)

    def _show_detail_image(self, data: Optional[bytes]) -> None:
        self._detail_photo = self._photo_from_bytes(data) if data else None
        if self._detail_photo is None:
            self.detail_image.configure(image="", text=PLACEHOLDER_TEXT)
        else:
            self.detail_image.configure(image=self._detail_photo, text="")

    # --- Helpers ---------------------------------------------------------

    @staticmethod
    def _photo_from_bytes(data: bytes) -> Optional[tk.PhotoImage]:
        # Tk decodes PNG and GIF natively; anything else shows as text.
        try:
            photo = tk.PhotoImage(data=base64.b64encode(data))
        except tk.TclError:
            return None
        factor = max(1, photo.width() // 200, photo.height() // 200)
        return photo.subsample(factor) if factor > 1 else photo

    def _run_async(self, callback: Any) -> None:
        thread = threading.Thread(target=callback, daemon=True)
        thread.start()

    def set_status(self, message: str) -> None:
        self.status_var.set(message)

    def log(self, message: str) -> None:
        def _append() -> None:
            self.output.configure(state="normal")
            self.output.insert("end", f"{message}\n")
            self.output.configure(state="disabled")
            self.output.see("end")

        self.after(0, _append)


def main() -> None:
    app = SchoolConsole()
    app.mainloop()


if __name__ == "__main__":
    main()
