"""Tk dialogs for recording assets and room notes.

Each parameter gets an entry whose text is parsed and validated on every
keystroke; the messages under the fields come from ``describe_issue`` and the
save button stays disabled until the whole form is valid.
"""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Sequence

try:
    import tkinter as tk
    from tkinter import filedialog, messagebox, ttk
except Exception:  # pragma: no cover
    tk = None  # type: ignore

from ..app_io.photos import PhotoImportError, PhotoRole, PhotoScope
from ..core.parameters import Family, ParameterDataType, ParameterDefinition, ParameterValue
from ..core.stable_id import new_id
from ..features.forms.validator import describe_issue, parse_field, validate
from ..features.inventory.records import AssetType, InventoryError, InvalidRecordError

if TYPE_CHECKING:
    from ..gui_client import SurveyAppGUI

logger = logging.getLogger(__name__)

NEW_TYPE_LABEL = "<new type>"
PHOTO_FILETYPES = [("Images", "*.jpg *.jpeg *.png *.heic *.bmp *.tif *.tiff"), ("All files", "*.*")]


class ParameterForm:
    """Grid of labelled entries for a list of parameter definitions."""

    def __init__(self, parent, definitions: Sequence[ParameterDefinition], on_change: Callable[[], None]) -> None:
        self.frame = tk.Frame(parent)
        self.definitions = list(definitions)
        self.on_change = on_change
        self.vars: Dict[uuid.UUID, tk.StringVar] = {}
        self.errors: Dict[uuid.UUID, tk.Label] = {}
        for row, definition in enumerate(self.definitions):
            label = definition.name + (" *" if definition.is_required else "")
            if definition.unit:
                label += f" ({definition.unit})"
            tk.Label(self.frame, text=label, anchor='w').grid(row=row * 2, column=0, sticky='w', padx=4)
            var = tk.StringVar(self.frame)
            if definition.data_type is ParameterDataType.ENUM and definition.enum_values:
                widget = ttk.Combobox(self.frame, textvariable=var, values=list(definition.enum_values), state='readonly')
            elif definition.data_type is ParameterDataType.BOOLEAN:
                widget = ttk.Combobox(self.frame, textvariable=var, values=["", "yes", "no"], state='readonly')
            else:
                widget = tk.Entry(self.frame, textvariable=var, width=32)
            widget.grid(row=row * 2, column=1, sticky='we', padx=4, pady=(4, 0))
            if definition.data_type is ParameterDataType.DATE:
                tk.Label(self.frame, text="YYYY-MM-DD", fg='gray').grid(row=row * 2, column=2, sticky='w')
            error = tk.Label(self.frame, text="", fg='red', anchor='w')
            error.grid(row=row * 2 + 1, column=1, sticky='w', padx=4)
            var.trace_add('write', lambda *_args, d=definition: self._field_changed(d))
            self.vars[definition.id] = var
            self.errors[definition.id] = error
        self.frame.columnconfigure(1, weight=1)

    def value_of(self, definition: ParameterDefinition) -> Optional[ParameterValue]:
        return parse_field(definition, self.vars[definition.id].get())

    def values(self) -> Dict[uuid.UUID, Optional[ParameterValue]]:
        return {d.id: self.value_of(d) for d in self.definitions}

    def is_valid(self) -> bool:
        return all(not validate(self.value_of(d), d) for d in self.definitions)

    def show_all_issues(self) -> None:
        for definition in self.definitions:
            self._show_issues(definition)

    def _field_changed(self, definition: ParameterDefinition) -> None:
        self._show_issues(definition)
        self.on_change()

    def _show_issues(self, definition: ParameterDefinition) -> None:
        issues = validate(self.value_of(definition), definition)
        text = "\n".join(describe_issue(i, definition.unit) for i in issues)
        self.errors[definition.id].config(text=text)

    def destroy(self) -> None:
        self.frame.destroy()


def _pick_photo(app: "SurveyAppGUI", scope: PhotoScope, owner_id: uuid.UUID, role: PhotoRole) -> Optional[uuid.UUID]:
    path = filedialog.askopenfilename(title="Select photo", filetypes=PHOTO_FILETYPES)
    if not path:
        return None
    try:
        photo = app.photo_store.import_photo(path, scope, owner_id, role)
    except PhotoImportError as e:
        logger.warning("Photo import failed: %s", e)
        messagebox.showerror("Photo", str(e))
        return None
    app.photos[photo.id] = photo
    return photo.id


class AddAssetDialog:
    """Pick a family and type, fill in the parameters, save the asset."""

    def __init__(self, app: "SurveyAppGUI", room_uid: uuid.UUID, room_label: str) -> None:
        self.app = app
        self.room_uid = room_uid
        self.inventory = app.survey.inventory
        self.families: List[Family] = list(app.survey.schema.families)
        self.type_form: Optional[ParameterForm] = None
        self.instance_form: Optional[ParameterForm] = None
        self.type_photo_id: Optional[uuid.UUID] = None
        self.instance_photo_ids: List[uuid.UUID] = []
        # Photos are taken before the records exist, so owners get ids up front.
        self.pending_type_id = new_id()
        self.pending_asset_id = new_id()

        self.win = tk.Toplevel(app.root)
        self.win.title(f"Add asset - {room_label}")
        self.win.transient(app.root)

        top = tk.Frame(self.win)
        top.pack(fill=tk.X, padx=8, pady=8)
        tk.Label(top, text="Family").grid(row=0, column=0, sticky='w')
        self.family_var = tk.StringVar(top)
        family_box = ttk.Combobox(top, textvariable=self.family_var, state='readonly',
                                  values=[f.name for f in self.families])
        family_box.grid(row=0, column=1, sticky='we', padx=4)
        family_box.bind('<<ComboboxSelected>>', lambda _e: self._family_changed())
        tk.Label(top, text="Type").grid(row=1, column=0, sticky='w')
        self.type_var = tk.StringVar(top)
        self.type_box = ttk.Combobox(top, textvariable=self.type_var, state='readonly')
        self.type_box.grid(row=1, column=1, sticky='we', padx=4)
        self.type_box.bind('<<ComboboxSelected>>', lambda _e: self._type_changed())
        tk.Label(top, text="New type name").grid(row=2, column=0, sticky='w')
        self.type_name_var = tk.StringVar(top)
        self.type_name_entry = tk.Entry(top, textvariable=self.type_name_var)
        self.type_name_entry.grid(row=2, column=1, sticky='we', padx=4)
        top.columnconfigure(1, weight=1)

        self.type_frame = tk.LabelFrame(self.win, text="Type parameters")
        self.type_frame.pack(fill=tk.X, padx=8)
        self.instance_frame = tk.LabelFrame(self.win, text="Instance parameters")
        self.instance_frame.pack(fill=tk.X, padx=8, pady=(4, 0))

        buttons = tk.Frame(self.win)
        buttons.pack(fill=tk.X, padx=8, pady=8)
        self.type_photo_btn = tk.Button(buttons, text="Type photo", command=self._add_type_photo)
        self.type_photo_btn.pack(side=tk.LEFT)
        tk.Button(buttons, text="Asset photo", command=self._add_instance_photo).pack(side=tk.LEFT, padx=4)
        self.photo_label = tk.Label(buttons, text="", fg='gray')
        self.photo_label.pack(side=tk.LEFT, padx=4)
        tk.Button(buttons, text="Cancel", command=self.win.destroy).pack(side=tk.RIGHT)
        self.save_btn = tk.Button(buttons, text="Save", command=self.save, state=tk.DISABLED)
        self.save_btn.pack(side=tk.RIGHT, padx=4)

        if self.families:
            family_box.current(0)
            self._family_changed()

    @property
    def family(self) -> Optional[Family]:
        name = self.family_var.get()
        for family in self.families:
            if family.name == name:
                return family
        return None

    def _types(self) -> List[AssetType]:
        family = self.family
        if family is None:
            return []
        return [t for t in self.inventory.asset_types.values() if t.family_id == family.id]

    @property
    def selected_type(self) -> Optional[AssetType]:
        name = self.type_var.get()
        for asset_type in self._types():
            if asset_type.name == name:
                return asset_type
        return None

    def _family_changed(self) -> None:
        family = self.family
        if family is None:
            return
        self.type_box.config(values=[t.name for t in self._types()] + [NEW_TYPE_LABEL])
        self.type_var.set(NEW_TYPE_LABEL)
        if self.instance_form is not None:
            self.instance_form.destroy()
        self.instance_form = ParameterForm(self.instance_frame, family.instance_parameters, self._refresh)
        self.instance_form.frame.pack(fill=tk.X)
        self._type_changed()

    def _type_changed(self) -> None:
        family = self.family
        if self.type_form is not None:
            self.type_form.destroy()
            self.type_form = None
        creating = self.selected_type is None
        self.type_name_entry.config(state=tk.NORMAL if creating else tk.DISABLED)
        self.type_photo_btn.config(state=tk.NORMAL if creating else tk.DISABLED)
        if creating and family is not None:
            self.type_form = ParameterForm(self.type_frame, family.type_parameters, self._refresh)
            self.type_form.frame.pack(fill=tk.X)
        self._refresh()

    def _refresh(self) -> None:
        valid = self.instance_form is not None and self.instance_form.is_valid()
        if self.type_form is not None:
            valid = valid and self.type_form.is_valid()
        self.save_btn.config(state=tk.NORMAL if valid else tk.DISABLED)
        count = len(self.instance_photo_ids) + (1 if self.type_photo_id else 0)
        self.photo_label.config(text=f"{count} photo(s)" if count else "")

    def _add_type_photo(self) -> None:
        photo_id = _pick_photo(self.app, PhotoScope.TYPE, self.pending_type_id, PhotoRole.MAIN)
        if photo_id is not None:
            self.type_photo_id = photo_id
            self._refresh()

    def _add_instance_photo(self) -> None:
        role = PhotoRole.EXTRA if self.instance_photo_ids else PhotoRole.MAIN
        photo_id = _pick_photo(self.app, PhotoScope.INSTANCE, self.pending_asset_id, role)
        if photo_id is not None:
            self.instance_photo_ids.append(photo_id)
            self._refresh()

    def save(self) -> None:
        family = self.family
        if family is None or self.instance_form is None:
            return
        try:
            asset_type = self.selected_type
            if asset_type is None:
                type_values = self.type_form.values() if self.type_form is not None else {}
                self.inventory.add_asset_with_new_type(
                    self.room_uid, family.id, self.type_name_var.get(), type_values,
                    self.instance_form.values(), self.type_photo_id, self.instance_photo_ids,
                    type_record_id=self.pending_type_id, record_id=self.pending_asset_id)
            else:
                self.inventory.add_asset(
                    self.room_uid, asset_type.id, self.instance_form.values(), self.instance_photo_ids,
                    record_id=self.pending_asset_id)
        except InvalidRecordError:
            self.instance_form.show_all_issues()
            if self.type_form is not None:
                self.type_form.show_all_issues()
            messagebox.showerror("Add asset", "Some fields are not valid.", parent=self.win)
            return
        except InventoryError as e:
            messagebox.showerror("Add asset", str(e), parent=self.win)
            return
        self.win.destroy()
        self.app.refresh_counts()


class AddNoteDialog:
    def __init__(self, app: "SurveyAppGUI", room_uid: uuid.UUID, room_label: str) -> None:
        self.app = app
        self.room_uid = room_uid
        self.pending_note_id = new_id()
        self.main_photo_id: Optional[uuid.UUID] = None
        self.extra_photo_ids: List[uuid.UUID] = []

        self.win = tk.Toplevel(app.root)
        self.win.title(f"Room note - {room_label}")
        self.win.transient(app.root)
        body = tk.Frame(self.win)
        body.pack(fill=tk.BOTH, expand=True, padx=8, pady=8)
        self.empty_var = tk.BooleanVar(body, value=False)
        self.blocked_var = tk.BooleanVar(body, value=False)
        tk.Checkbutton(body, text="Room is empty", variable=self.empty_var).pack(anchor='w')
        tk.Checkbutton(body, text="Room is blocked", variable=self.blocked_var).pack(anchor='w')
        tk.Label(body, text="Description").pack(anchor='w', pady=(6, 0))
        self.text = tk.Text(body, width=40, height=5)
        self.text.pack(fill=tk.BOTH, expand=True)

        buttons = tk.Frame(self.win)
        buttons.pack(fill=tk.X, padx=8, pady=8)
        tk.Button(buttons, text="Photo", command=self._add_photo).pack(side=tk.LEFT)
        self.photo_label = tk.Label(buttons, text="", fg='gray')
        self.photo_label.pack(side=tk.LEFT, padx=4)
        tk.Button(buttons, text="Cancel", command=self.win.destroy).pack(side=tk.RIGHT)
        tk.Button(buttons, text="Save", command=self.save).pack(side=tk.RIGHT, padx=4)

    def _add_photo(self) -> None:
        role = PhotoRole.MAIN if self.main_photo_id is None else PhotoRole.EXTRA
        photo_id = _pick_photo(self.app, PhotoScope.ROOM_NOTE, self.pending_note_id, role)
        if photo_id is None:
            return
        if role is PhotoRole.MAIN:
            self.main_photo_id = photo_id
        else:
            self.extra_photo_ids.append(photo_id)
        count = 1 + len(self.extra_photo_ids)
        self.photo_label.config(text=f"{count} photo(s)")

    def save(self) -> None:
        try:
            self.app.survey.inventory.add_note(
                self.room_uid,
                description=self.text.get('1.0', tk.END),
                empty_room=self.empty_var.get(),
                room_is_blocked=self.blocked_var.get(),
                main_photo_id=self.main_photo_id,
                extra_photo_ids=self.extra_photo_ids,
                record_id=self.pending_note_id,
            )
        except InventoryError as e:
            messagebox.showerror("Room note", str(e), parent=self.win)
            return
        self.win.destroy()
        self.app.refresh_counts()
