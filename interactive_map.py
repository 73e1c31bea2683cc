"""
Interactive TSP Map Editor - Tkinter Version
Click to place or remove cities, drag to pan, scroll to zoom, and send the
map to a remote solver. The returned tour is drawn as soon as it arrives.
"""

import logging
import sys
import tkinter as tk
from tkinter import filedialog

from config import EditorConfig
from editor import MapEditor
from interaction import wheel_steps
from renderer import CanvasRenderer
from solver_channel import SolverChannel, SolverParameters
from visualization import MapVisualizer

logger = logging.getLogger(__name__)


class InteractiveTSPMap:
    """Tk front end around a MapEditor."""

    def __init__(self, root: tk.Tk, config: EditorConfig, channel: SolverChannel = None):
        self.root = root
        self.config = config
        self.root.title("TSP Map Editor")
        self.root.geometry("1200x800")

        self.colors = {
            'bg': '#2c3e50',
            'panel_bg': '#34495e',
            'text': '#ecf0f1',
            'muted': '#95a5a6',
        }
        self.root.configure(bg=self.colors['bg'])

        self.channel = channel
        self.canvas = tk.Canvas(self.root, bg='#ffffff', highlightthickness=0, cursor='crosshair')
        self.renderer = CanvasRenderer(self.canvas, config)
        self.editor = MapEditor(config, channel=channel, on_redraw=self.renderer)

        self.setup_controls()
        self.canvas.pack(side=tk.LEFT, fill=tk.BOTH, expand=True)
        self.setup_bindings()

        # seeding waits for the first <Configure> so the real canvas size is known
        self._pending_seed = config.seed_cities

        self.root.protocol("WM_DELETE_WINDOW", self.on_close)
        self.schedule_updates()

    # --------------------------------------------------------
    # UI construction
    # --------------------------------------------------------
    def setup_controls(self):
        panel = tk.Frame(self.root, bg=self.colors['panel_bg'], width=240)
        panel.pack(side=tk.RIGHT, fill=tk.Y)
        panel.pack_propagate(False)

        tk.Label(panel, text="TSP Map Editor", font=('Arial', 16, 'bold'),
                 bg=self.colors['panel_bg'], fg=self.colors['text']).pack(pady=(15, 10))

        buttons = [
            ("Solve", self.solve, '#27ae60'),
            ("Undo (Ctrl+Z)", self.undo, '#3498db'),
            ("Redo (Ctrl+Y)", self.redo, '#3498db'),
            ("Add 10 Random", self.add_random_cities, '#f39c12'),
            ("Clear All", self.clear_all, '#e74c3c'),
            ("Reset View (Home)", self.reset_view, '#7f8c8d'),
            ("Export PNG", self.export_png, '#9b59b6'),
        ]
        self.buttons = {}
        for text, command, color in buttons:
            button = self.create_button(panel, text, command, color)
            button.pack(fill=tk.X, padx=15, pady=4)
            self.buttons[command.__name__] = button

        params_frame = tk.LabelFrame(panel, text="Solver Parameters", bg=self.colors['panel_bg'],
                                     fg=self.colors['text'], font=('Arial', 10, 'bold'))
        params_frame.pack(fill=tk.X, padx=15, pady=10)
        self.param_vars = {}
        for row, name in enumerate(("alpha", "beta", "rho")):
            tk.Label(params_frame, text=f"{name}:", bg=self.colors['panel_bg'],
                     fg=self.colors['text']).grid(row=row, column=0, sticky="w", padx=5, pady=2)
            var = tk.StringVar(value=str(getattr(self.config, name)))
            tk.Entry(params_frame, textvariable=var, width=10).grid(row=row, column=1, sticky="e", padx=5, pady=2)
            self.param_vars[name] = var

        self.status_label = tk.Label(panel, text="", font=('Arial', 10), justify=tk.LEFT, wraplength=210,
                                     bg=self.colors['panel_bg'], fg=self.colors['text'])
        self.status_label.pack(fill=tk.X, padx=15, pady=(10, 0))
        self.message_label = tk.Label(panel, text="Click to add or remove cities, drag to pan, scroll to zoom",
                                      font=('Arial', 9), justify=tk.LEFT, wraplength=210,
                                      bg=self.colors['panel_bg'], fg=self.colors['muted'])
        self.message_label.pack(fill=tk.X, padx=15, pady=5)

    def create_button(self, parent, text, command, color):
        return tk.Button(
            parent, text=text, command=command, bg=color, fg='white',
            activebackground=color, activeforeground='white',
            font=('Arial', 10, 'bold'), relief=tk.FLAT, cursor='hand2', pady=4
        )

    def setup_bindings(self):
        self.canvas.bind('<ButtonPress-1>', self.on_press)
        self.canvas.bind('<Motion>', self.on_motion)
        self.canvas.bind('<ButtonRelease-1>', self.on_release)
        self.canvas.bind('<MouseWheel>', self.on_mousewheel)
        self.canvas.bind('<Button-4>', lambda e: self.on_wheel_steps(e, 1))
        self.canvas.bind('<Button-5>', lambda e: self.on_wheel_steps(e, -1))
        self.canvas.bind('<Configure>', self.on_configure)

        # global shortcuts; returning "break" stops the default handling
        modifiers = ['Control'] + (['Command'] if sys.platform == 'darwin' else [])
        for mod in modifiers:
            self.root.bind_all(f'<{mod}-z>', self.on_undo_key)
            self.root.bind_all(f'<{mod}-y>', self.on_redo_key)
            self.root.bind_all(f'<{mod}-Z>', self.on_redo_key)
        self.root.bind_all('<Home>', lambda e: self.reset_view())

    # --------------------------------------------------------
    # Event handlers
    # --------------------------------------------------------
    def on_press(self, event):
        self.editor.pointer_down((event.x, event.y))
        self.sync_view()

    def on_motion(self, event):
        self.editor.pointer_move((event.x, event.y))
        self.sync_view()

    def on_release(self, event):
        self.editor.pointer_up((event.x, event.y))
        self.sync_view()

    def on_configure(self, event):
        if self._pending_seed:
            n, self._pending_seed = self._pending_seed, 0
            self.editor.seed_cities(n, self.config.pattern, event.width, event.height)
            self.sync_view()
        else:
            self.editor.redraw()

    def on_mousewheel(self, event):
        self.on_wheel_steps(event, wheel_steps(event.delta))

    def on_wheel_steps(self, event, steps):
        self.editor.wheel((event.x, event.y), steps)
        self.sync_view()

    def on_undo_key(self, event):
        self.undo()
        return "break"

    def on_redo_key(self, event):
        self.redo()
        return "break"

    def on_close(self):
        if self.channel is not None:
            self.channel.close()
        self.root.destroy()

    # --------------------------------------------------------
    # Commands
    # --------------------------------------------------------
    def undo(self):
        if not self.editor.undo():
            self.show_message("Nothing to undo")
        self.sync_view()

    def redo(self):
        if not self.editor.redo():
            self.show_message("Nothing to redo")
        self.sync_view()

    def add_random_cities(self):
        self.editor.add_random_cities(10, self.canvas.winfo_width(), self.canvas.winfo_height())
        self.sync_view()

    def clear_all(self):
        self.editor.clear_cities()
        self.sync_view()

    def reset_view(self):
        self.editor.reset_view()
        self.sync_view()

    def read_parameters(self) -> SolverParameters:
        values = {}
        for name, var in self.param_vars.items():
            try:
                values[name] = float(var.get())
            except ValueError:
                raise ValueError(f"{name} must be a number") from None
        return SolverParameters(**values)

    def solve(self):
        if not self.editor.cities:
            self.show_message("Add at least one city before solving")
            return
        if self.config.send_params:
            try:
                self.editor.set_parameters(self.read_parameters())
            except ValueError as e:
                self.show_message(f"Invalid parameters: {e}")
                return
        if self.editor.request_solve():
            self.show_message(f"Sent {len(self.editor.cities)} cities to the solver")
        elif self.config.send_policy == 'queue':
            self.show_message("Solver offline, request will be sent on connect")
        else:
            self.show_message("Solver offline, request dropped")
        self.sync_view()

    def export_png(self):
        path = filedialog.asksaveasfilename(defaultextension=".png", filetypes=[("PNG image", "*.png")])
        if not path:
            return
        try:
            MapVisualizer().plot_map(self.editor.cities, self.editor.tour,
                                     matrix=self.editor.matrix, save_path=path)
            self.show_message(f"Exported {path}")
        except (OSError, ValueError) as e:
            logger.warning("Export failed: %s", e)
            self.show_message(f"Export failed: {e}")

    # --------------------------------------------------------
    # Periodic update
    # --------------------------------------------------------
    def schedule_updates(self):
        """Drain solver results on the UI thread."""
        self.editor.process_solver_updates()
        self.sync_view()
        self.root.after(self.config.poll_interval_ms, self.schedule_updates)

    def sync_view(self):
        self.canvas.config(cursor=self.editor.state.cursor)
        self.status_label.config(text=self.editor.status_text())
        self.buttons["undo"].config(state=tk.NORMAL if self.editor.can_undo() else tk.DISABLED)
        self.buttons["redo"].config(state=tk.NORMAL if self.editor.can_redo() else tk.DISABLED)

    def show_message(self, text: str):
        self.message_label.config(text=text)


def run(config: EditorConfig):
    channel = SolverChannel(
        url=config.solver_url,
        send_policy=config.send_policy,
        max_pending=config.max_pending,
        reconnect_delay=config.reconnect_delay,
    )
    channel.start()

    root = tk.Tk()
    InteractiveTSPMap(root, config, channel)
    try:
        root.mainloop()
    finally:
        channel.close()
