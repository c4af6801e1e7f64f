"""
LexiMind - Tkinter front-end

Two views:
1. Search: look up a word, see its definition, illustration gallery,
   pronunciation, hidden gems, and chat with an assistant about it.
2. Wordbook: saved words with their pictures, plus a generated
   fill-in-the-blank practice story.

Setup (from repo root):

    python -m venv .venv
    source .venv/bin/activate   # or .venv\\Scripts\\activate on Windows
    pip install -e .

Ensure .env contains:
    OPENAI_API_KEY=sk-...

Then run:
    python main.py
"""

import tkinter as tk
from tkinter import ttk
from typing import Dict, Optional, Tuple

from PIL import Image, ImageTk

from leximind.api import AIGateway
from leximind.config import create_client, load_settings
from leximind.controller import View, ViewController
from leximind.languages import SupportedLanguage
from leximind.logger import logger
from leximind.session import WordSession
from leximind.store import CollectionStore
from leximind.tasks import ThreadedRunner

BG = "#1e1e1e"
PANEL_BG = "#2d2d2d"
TEXT = "#e0e0e0"
MUTED = "#9a9a9a"
ACCENT = "#ffb347"
LINK = "#7bb3ff"

CHAT_SUGGESTIONS = ("Give me a quiz.", "Is this word formal?", "Translate a sentence.")


# ---------------------------------------------------------------------------
# Scrollable Frame Widget
# ---------------------------------------------------------------------------

class ScrollableFrame(ttk.Frame):
    """
    Vertically scrollable container. Add widgets to `.content`.
    The scrollbar only shows when the content overflows.
    """

    def __init__(self, parent, **kwargs) -> None:
        super().__init__(parent, **kwargs)
        self._scrollbar_visible = False

        self.canvas = tk.Canvas(self, highlightthickness=0, background=BG)
        self.scrollbar = ttk.Scrollbar(self, orient="vertical", command=self.canvas.yview)
        self.content = ttk.Frame(self.canvas)
        self.content_window = self.canvas.create_window((0, 0), window=self.content, anchor="nw")

        self.canvas.configure(yscrollcommand=self._on_scroll_set)
        self.canvas.pack(side="left", fill="both", expand=True)

        self.content.bind("<Configure>", self._on_content_configure)
        self.canvas.bind("<Configure>", self._on_canvas_configure)
        self.bind("<Enter>", lambda e: self.bind_all("<MouseWheel>", self._on_mousewheel))
        self.bind("<Leave>", lambda e: self.unbind_all("<MouseWheel>"))

    def _on_scroll_set(self, first: str, last: str) -> None:
        needs_scrollbar = not (float(first) <= 0.0 and float(last) >= 1.0)
        if needs_scrollbar and not self._scrollbar_visible:
            self.scrollbar.pack(side="right", fill="y")
            self._scrollbar_visible = True
        elif not needs_scrollbar and self._scrollbar_visible:
            self.scrollbar.pack_forget()
            self._scrollbar_visible = False
        self.scrollbar.set(first, last)

    def _on_content_configure(self, event: tk.Event) -> None:
        self.canvas.configure(scrollregion=self.canvas.bbox("all"))

    def _on_canvas_configure(self, event: tk.Event) -> None:
        self.canvas.itemconfigure(self.content_window, width=event.width)

    def _on_mousewheel(self, event: tk.Event) -> None:
        # macOS reports small deltas, Windows multiples of 120
        step = -1 if event.delta > 0 else 1
        self.canvas.yview_scroll(step, "units")

    def scroll_to_top(self) -> None:
        self.canvas.yview_moveto(0)


# ---------------------------------------------------------------------------
# Loading Spinner Widget
# ---------------------------------------------------------------------------

class LoadingSpinner(ttk.Label):
    """Animated text spinner; stops itself when destroyed."""

    FRAMES = ["⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏"]

    def __init__(self, parent, text: str = "Loading...") -> None:
        super().__init__(parent, text=f"{self.FRAMES[0]} {text}", foreground=LINK, font=("Helvetica", 13))
        self.text = text
        self._index = 0
        self._after_id: Optional[str] = None
        self.bind("<Destroy>", self._on_destroy)
        self._animate()

    def _animate(self) -> None:
        self.configure(text=f"{self.FRAMES[self._index]} {self.text}")
        self._index = (self._index + 1) % len(self.FRAMES)
        self._after_id = self.after(100, self._animate)

    def _on_destroy(self, event: tk.Event) -> None:
        if event.widget is self and self._after_id:
            self.after_cancel(self._after_id)
            self._after_id = None


# ---------------------------------------------------------------------------
# Image cache
# ---------------------------------------------------------------------------

class PhotoCache:
    """Keeps PhotoImage references alive (Tk drops images without one)."""

    def __init__(self) -> None:
        self._photos: Dict[Tuple[str, int, int], ImageTk.PhotoImage] = {}

    def get(self, path: str, max_size: Tuple[int, int]) -> Optional[ImageTk.PhotoImage]:
        key = (path, max_size[0], max_size[1])
        if key not in self._photos:
            try:
                with Image.open(path) as image:
                    resized = image.copy()
                resized.thumbnail(max_size, Image.Resampling.LANCZOS)
            except OSError as e:
                logger.img_error(f"Could not display {path}: {e}")
                return None
            self._photos[key] = ImageTk.PhotoImage(resized)
        return self._photos[key]


def clear_children(frame: tk.Widget) -> None:
    for child in frame.winfo_children():
        child.destroy()


def gallery_ready(session: WordSession) -> bool:
    """The image panel shows as soon as a picture or a definition has arrived."""
    return session.definition is not None or session.current_image is not None


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------

class LexiMindApp(tk.Tk):
    def __init__(self) -> None:
        super().__init__()
        logger.ui("Initializing LexiMind window...")

        self.title("LexiMind")
        window_width, window_height = 1100, 800
        center_x = int(self.winfo_screenwidth() / 2 - window_width / 2)
        center_y = int(self.winfo_screenheight() / 2 - window_height / 2)
        self.geometry(f"{window_width}x{window_height}+{center_x}+{center_y}")
        self.minsize(600, 400)
        self.configure(bg=BG)
        self._configure_style()

        settings = load_settings()
        gateway = AIGateway(create_client(settings), settings)
        store = CollectionStore(settings.collection_path)
        runner = ThreadedRunner(lambda fn: self.after(0, fn))
        self.controller = ViewController(gateway, store, runner)
        self.photos = PhotoCache()

        self.header = HeaderBar(self, self.controller)
        self.header.pack(fill="x")

        if not gateway.is_available:
            ttk.Label(
                self,
                text="⚠ OPENAI_API_KEY is not set. Add it to .env to look up words.",
                foreground=ACCENT,
            ).pack(fill="x", padx=20, pady=(4, 0))

        container = ttk.Frame(self)
        container.pack(fill="both", expand=True)
        container.rowconfigure(0, weight=1)
        container.columnconfigure(0, weight=1)

        self.views = {
            View.SEARCH: SearchView(container, self),
            View.WORDBOOK: WordbookView(container, self),
        }
        for frame in self.views.values():
            frame.grid(row=0, column=0, sticky="nsew")

        self._refresh_pending = False
        self.controller.subscribe(self._schedule_refresh)
        self.refresh()
        logger.ui("Application initialized successfully")

    def _configure_style(self) -> None:
        style = ttk.Style()
        style.theme_use("clam")
        style.configure("TFrame", background=BG)
        style.configure("Panel.TFrame", background=PANEL_BG)
        style.configure("TLabel", background=BG, foreground=TEXT, font=("Helvetica", 13))
        style.configure("Panel.TLabel", background=PANEL_BG, foreground=TEXT)
        style.configure("TButton", background=PANEL_BG, foreground=TEXT, font=("Helvetica", 12))
        style.map("TButton", background=[("active", "#3d3d3d"), ("disabled", "#252525")])
        style.configure("Selected.TButton", background="#4a6fa5", foreground="#ffffff")
        style.map("Selected.TButton", background=[("active", "#5a7fb5")])
        style.configure("Accent.TButton", background="#b8651b", foreground="#ffffff")
        style.map("Accent.TButton", background=[("active", "#d07a2a"), ("disabled", "#5a4330")])
        style.configure("TEntry", fieldbackground="#3d3d3d", foreground="#ffffff")
        style.configure("TCombobox", fieldbackground="#3d3d3d", background=PANEL_BG,
                        foreground="#ffffff", arrowcolor="#ffffff")
        style.map("TCombobox", fieldbackground=[("readonly", "#3d3d3d")])

    def _schedule_refresh(self) -> None:
        # Coalesce notifications; rebuild once the triggering callback has returned
        if self._refresh_pending:
            return
        self._refresh_pending = True
        self.after_idle(self.refresh)

    def refresh(self) -> None:
        self._refresh_pending = False
        self.header.refresh()
        self.views[self.controller.view].tkraise()
        self.views[self.controller.view].refresh()


class HeaderBar(ttk.Frame):
    def __init__(self, app: LexiMindApp, controller: ViewController) -> None:
        super().__init__(app, style="Panel.TFrame", padding=(20, 10))
        self.controller = controller

        ttk.Button(self, text="📖 LexiMind", command=lambda: controller.show_view(View.SEARCH)).pack(side="left")

        self.wordbook_button = ttk.Button(self, command=controller.toggle_wordbook)
        self.wordbook_button.pack(side="right")

        languages = SupportedLanguage.display_names()

        self.explain_var = tk.StringVar(value=controller.explanation_language.value)
        explain = ttk.Combobox(self, textvariable=self.explain_var, values=languages, state="readonly", width=20)
        explain.pack(side="right", padx=(4, 20))
        explain.bind("<<ComboboxSelected>>", self._on_explain_selected)
        ttk.Label(self, text="EXPLAIN IN", style="Panel.TLabel", font=("Helvetica", 10, "bold")).pack(side="right")

        self.native_var = tk.StringVar(value=controller.native_language.value)
        native = ttk.Combobox(self, textvariable=self.native_var, values=languages, state="readonly", width=20)
        native.pack(side="right", padx=(4, 20))
        native.bind("<<ComboboxSelected>>", self._on_native_selected)
        ttk.Label(self, text="I SPEAK", style="Panel.TLabel", font=("Helvetica", 10, "bold")).pack(side="right")

    def _on_explain_selected(self, event: tk.Event) -> None:
        self.controller.set_explanation_language(SupportedLanguage.from_string(self.explain_var.get()))

    def _on_native_selected(self, event: tk.Event) -> None:
        self.controller.set_native_language(SupportedLanguage.from_string(self.native_var.get()))

    def refresh(self) -> None:
        count = len(self.controller.store)
        if self.controller.view == View.WORDBOOK:
            self.wordbook_button.configure(text="🔍 Search")
        else:
            self.wordbook_button.configure(text=f"🔖 Wordbook ({count})" if count else "🔖 Wordbook")


# ---------------------------------------------------------------------------
# Search view
# ---------------------------------------------------------------------------

class SearchView(ttk.Frame):
    def __init__(self, parent, app: LexiMindApp) -> None:
        super().__init__(parent)
        self.app = app
        self.controller = app.controller

        self.columnconfigure(0, weight=1)
        self.rowconfigure(1, weight=1)

        search_bar = ttk.Frame(self, padding=(20, 15))
        search_bar.grid(row=0, column=0, columnspan=2, sticky="ew")
        self.query_var = tk.StringVar()
        self.query_var.trace_add("write", lambda *_: self._update_search_button())
        entry = ttk.Entry(search_bar, textvariable=self.query_var, font=("Helvetica", 16))
        entry.pack(side="left", fill="x", expand=True)
        entry.bind("<Return>", lambda e: self._on_search())
        self.search_button = ttk.Button(search_bar, text="Search", style="Accent.TButton", command=self._on_search)
        self.search_button.pack(side="left", padx=(10, 0))

        self.scrollable = ScrollableFrame(self)
        self.scrollable.grid(row=1, column=0, sticky="nsew")
        self.body = self.scrollable.content

        self.chat_panel = ChatPanel(self, self.controller)

    def _update_search_button(self) -> None:
        # A new search while one is loading supersedes it
        enabled = bool(self.query_var.get().strip())
        self.search_button.configure(state="normal" if enabled else "disabled")

    def _on_search(self) -> None:
        if self.controller.search(self.query_var.get()):
            self.scrollable.scroll_to_top()

    def refresh(self) -> None:
        self._update_search_button()
        clear_children(self.body)
        session = self.controller.session

        if session.chat_open and session.definition is not None:
            self.chat_panel.grid(row=1, column=1, sticky="nsew", padx=(0, 10), pady=(0, 10))
            self.chat_panel.refresh()
        else:
            self.chat_panel.grid_remove()

        if session.definition is None:
            if session.loading_definition:
                LoadingSpinner(self.body, text=f"Looking up \"{session.query}\"...").pack(pady=(40, 10))
                if gallery_ready(session):
                    early = ttk.Frame(self.body, padding=(20, 0))
                    early.pack()
                    self._render_gallery(early)
            elif session.error:
                ttk.Label(self.body, text=session.error, foreground="#ff8a80").pack(pady=60)
            else:
                ttk.Label(
                    self.body,
                    text="Type a word to explore its meaning, story and feel.",
                    foreground=MUTED,
                    font=("Helvetica", 16),
                ).pack(pady=80)
            return

        columns = ttk.Frame(self.body, padding=(20, 0))
        columns.pack(fill="both", expand=True)
        columns.columnconfigure(0, weight=3, uniform="cols")
        columns.columnconfigure(1, weight=2, uniform="cols")

        left = ttk.Frame(columns)
        left.grid(row=0, column=0, sticky="nsew", padx=(0, 20))
        right = ttk.Frame(columns)
        right.grid(row=0, column=1, sticky="nsew")

        self._render_definition(left)
        self._render_gallery(right)
        self._render_secrets(left)

        if not session.chat_open:
            ttk.Button(self.body, text="💬 Ask about this word", command=self.controller.open_chat).pack(
                anchor="e", padx=20, pady=(10, 20)
            )

    def _render_definition(self, parent: ttk.Frame) -> None:
        session = self.controller.session
        definition = session.definition

        title_row = ttk.Frame(parent)
        title_row.pack(fill="x", pady=(10, 0))
        ttk.Label(title_row, text=definition.word, font=("Georgia", 34, "bold"), foreground="#ffffff").pack(side="left")
        audio_button = ttk.Button(
            title_row,
            text="⏳" if session.loading_audio else "🔊",
            width=3,
            command=self.controller.play_pronunciation,
        )
        audio_button.pack(side="left", padx=10)
        if session.loading_audio:
            audio_button.state(["disabled"])

        ttk.Label(parent, text=f"{definition.phonetic}   ·   {definition.part_of_speech}",
                  foreground=MUTED).pack(anchor="w")

        wrap = 560
        ttk.Label(parent, text=definition.definition, wraplength=wrap, font=("Georgia", 17)).pack(anchor="w", pady=(15, 5))
        ttk.Label(parent, text=definition.original_definition, wraplength=wrap, foreground=MUTED,
                  font=("Georgia", 13, "italic")).pack(anchor="w", pady=(0, 10))

        if definition.vibes:
            ttk.Label(parent, text="VIBE CHECK", foreground=ACCENT, font=("Helvetica", 10, "bold")).pack(anchor="w", pady=(10, 0))
            for vibe in definition.vibes:
                ttk.Label(parent, text=f"⚡ {vibe}", wraplength=wrap).pack(anchor="w")

        ttk.Label(parent, text="EXAMPLES", foreground=ACCENT, font=("Helvetica", 10, "bold")).pack(anchor="w", pady=(15, 0))
        for example in definition.examples:
            ttk.Label(parent, text=f"“{example}”", wraplength=wrap, font=("Georgia", 13)).pack(anchor="w", pady=2)

        if definition.synonyms:
            ttk.Label(parent, text="SYNONYMS", foreground=ACCENT, font=("Helvetica", 10, "bold")).pack(anchor="w", pady=(15, 0))
            ttk.Label(parent, text=", ".join(definition.synonyms), wraplength=wrap).pack(anchor="w")

        if definition.etymology:
            ttk.Label(parent, text="ORIGIN", foreground=ACCENT, font=("Helvetica", 10, "bold")).pack(anchor="w", pady=(15, 0))
            ttk.Label(parent, text=definition.etymology, wraplength=wrap, foreground=MUTED).pack(anchor="w")

    def _render_gallery(self, parent: ttk.Frame) -> None:
        controller = self.controller
        session = controller.session
        image = controller.current_image

        frame = ttk.Frame(parent, style="Panel.TFrame", padding=10)
        frame.pack(fill="x", pady=(10, 0))

        if session.loading_image:
            LoadingSpinner(frame, text="Painting...").pack(pady=80)
        elif image:
            photo = self.app.photos.get(image, (400, 300))
            if photo is not None:
                ttk.Label(frame, image=photo, style="Panel.TLabel").pack()
            else:
                ttk.Label(frame, text="[Could not display image]", style="Panel.TLabel").pack(pady=40)
        else:
            ttk.Label(frame, text="No image available", style="Panel.TLabel", foreground=MUTED).pack(pady=80)

        if len(session.gallery) > 1:
            thumbs = ttk.Frame(frame, style="Panel.TFrame")
            thumbs.pack(pady=(8, 0))
            for index in range(len(session.gallery)):
                style = "Selected.TButton" if index == session.gallery.active_index else "TButton"
                ttk.Button(thumbs, text=str(index + 1), width=3, style=style,
                           command=lambda i=index: controller.select_image(i)).pack(side="left", padx=2)

        # Feedback, saving and variations wait for the definition
        if session.definition is None:
            return

        actions = ttk.Frame(frame, style="Panel.TFrame")
        actions.pack(fill="x", pady=(8, 0))
        if image:
            feedback = controller.current_feedback
            ttk.Button(actions, text="👍", width=3,
                       style="Selected.TButton" if feedback == "like" else "TButton",
                       command=lambda: controller.toggle_feedback("like")).pack(side="left")
            ttk.Button(actions, text="👎", width=3,
                       style="Selected.TButton" if feedback == "dislike" else "TButton",
                       command=lambda: controller.toggle_feedback("dislike")).pack(side="left", padx=4)

            saved = controller.is_current_saved
            save_button = ttk.Button(actions, text="✓ Saved" if saved else "🔖 Save to Wordbook",
                                     command=controller.save_current)
            save_button.pack(side="right")
            if saved:
                save_button.state(["disabled"])

        variation = ttk.Button(
            frame,
            text="Painting a new take..." if session.loading_variation else "✨ Generate variation",
            command=controller.generate_variation,
        )
        variation.pack(fill="x", pady=(8, 0))
        if session.loading_variation:
            variation.state(["disabled"])

    def _render_secrets(self, parent: ttk.Frame) -> None:
        session = self.controller.session
        box = ttk.Frame(parent, style="Panel.TFrame", padding=12)
        box.pack(fill="x", pady=(20, 10))

        ttk.Label(box, text="💡 Hidden gems", style="Panel.TLabel", font=("Helvetica", 14, "bold")).pack(anchor="w")

        if session.additional_meanings is None:
            button = ttk.Button(
                box,
                text="Unearthing..." if session.loading_meanings else "Reveal Secrets",
                command=self.controller.reveal_secrets,
            )
            button.pack(anchor="w", pady=(8, 0))
            if session.loading_meanings:
                button.state(["disabled"])
            return

        if not session.additional_meanings:
            ttk.Label(box, text="No secrets this time.", style="Panel.TLabel", foreground=MUTED).pack(anchor="w")
        for meaning in session.additional_meanings:
            ttk.Label(box, text=meaning.context.upper(), style="Panel.TLabel", foreground=ACCENT,
                      font=("Helvetica", 10, "bold")).pack(anchor="w", pady=(8, 0))
            ttk.Label(box, text=meaning.definition, style="Panel.TLabel", wraplength=540).pack(anchor="w")


class ChatPanel(ttk.Frame):
    def __init__(self, parent, controller: ViewController) -> None:
        super().__init__(parent, style="Panel.TFrame", padding=10, width=340)
        self.controller = controller

        header = ttk.Frame(self, style="Panel.TFrame")
        header.pack(fill="x")
        self.title_label = ttk.Label(header, style="Panel.TLabel", font=("Helvetica", 13, "bold"))
        self.title_label.pack(side="left")
        ttk.Button(header, text="✕", width=2, command=controller.close_chat).pack(side="right")

        self.transcript = tk.Text(self, wrap="word", width=40, height=20, background=PANEL_BG, foreground=TEXT,
                                  relief="flat", font=("Helvetica", 12), state="disabled")
        self.transcript.tag_configure("user", foreground="#ffffff", justify="right", rmargin=4, spacing3=8)
        self.transcript.tag_configure("assistant", foreground=TEXT, lmargin1=4, lmargin2=4, spacing3=8)
        self.transcript.tag_configure("hint", foreground=MUTED, justify="center")
        self.transcript.pack(fill="both", expand=True, pady=8)

        self.suggestions = ttk.Frame(self, style="Panel.TFrame")
        for suggestion in CHAT_SUGGESTIONS:
            ttk.Button(self.suggestions, text=f"“{suggestion}”",
                       command=lambda s=suggestion: self.input_var.set(s)).pack(fill="x", pady=2)

        self.input_row = ttk.Frame(self, style="Panel.TFrame")
        self.input_row.pack(fill="x", side="bottom")
        self.input_var = tk.StringVar()
        entry = ttk.Entry(self.input_row, textvariable=self.input_var)
        entry.pack(side="left", fill="x", expand=True)
        entry.bind("<Return>", lambda e: self._on_send())
        self.send_button = ttk.Button(self.input_row, text="Send", command=self._on_send)
        self.send_button.pack(side="left", padx=(6, 0))

    def _on_send(self) -> None:
        if self.controller.send_chat(self.input_var.get()):
            self.input_var.set("")

    def refresh(self) -> None:
        session = self.controller.session
        self.title_label.configure(text=f"Chat · {session.definition.word}")

        self.transcript.configure(state="normal")
        self.transcript.delete("1.0", "end")
        if not session.chat_messages:
            self.transcript.insert("end", "\nWhat else would you like to know?\n", "hint")
            self.suggestions.pack(fill="x", side="bottom", after=self.input_row)
        else:
            self.suggestions.pack_forget()
        for message in session.chat_messages:
            self.transcript.insert("end", f"{message.text}\n", message.role)
        if session.chat_pending:
            self.transcript.insert("end", "…\n", "hint")
        self.transcript.configure(state="disabled")
        self.transcript.see("end")

        self.send_button.configure(state="disabled" if session.chat_pending else "normal")


# ---------------------------------------------------------------------------
# Wordbook view
# ---------------------------------------------------------------------------

class StoryText(tk.Text):
    """Story body with click-to-reveal blanks."""

    def __init__(self, parent, controller: ViewController) -> None:
        super().__init__(parent, wrap="word", height=10, background="#f9f8f6", foreground="#292524",
                         relief="flat", font=("Georgia", 16), padx=16, pady=12, cursor="arrow")
        self.controller = controller
        self.tag_configure("hidden", background="#d6d3d1", foreground="#d6d3d1")
        self.tag_configure("revealed", background="#ffedd5", foreground="#7c2d12",
                           font=("Georgia", 16, "bold"))

    def render(self) -> None:
        board = self.controller.story_board
        self.configure(state="normal")
        self.delete("1.0", "end")
        # Tags outlive their text; drop last render's click bindings
        stale = [name for name in self.tag_names() if name.startswith("blank_")]
        if stale:
            self.tag_delete(*stale)
        for index, segment in enumerate(board.segments):
            if not segment.is_blank:
                self.insert("end", segment.text)
                continue
            tag = f"blank_{index}"
            if board.is_revealed(index):
                self.insert("end", segment.text, ("revealed", tag))
            else:
                # Hidden blanks keep the word's width so line breaks don't shift on reveal
                self.insert("end", segment.text, ("hidden", tag))
                self.tag_bind(tag, "<Button-1>", lambda e, i=index: self.controller.reveal_blank(i))
                self.tag_bind(tag, "<Enter>", lambda e: self.configure(cursor="hand2"))
                self.tag_bind(tag, "<Leave>", lambda e: self.configure(cursor="arrow"))
        self.configure(state="disabled")
        lines = int(self.index("end-1c").split(".")[0])
        self.configure(height=max(6, min(lines * 3, 20)))


class WordbookView(ttk.Frame):
    COLUMNS = 3

    def __init__(self, parent, app: LexiMindApp) -> None:
        super().__init__(parent)
        self.app = app
        self.controller = app.controller

        self.scrollable = ScrollableFrame(self)
        self.scrollable.pack(fill="both", expand=True)
        self.body = self.scrollable.content

    def refresh(self) -> None:
        clear_children(self.body)
        controller = self.controller
        items = controller.store.items

        header = ttk.Frame(self.body, padding=(20, 20, 20, 10))
        header.pack(fill="x")
        ttk.Label(header, text="My Wordbook", font=("Georgia", 28, "bold"), foreground="#ffffff").pack(side="left")
        ttk.Label(header, text=f"  {len(items)} saved", foreground=MUTED).pack(side="left")

        if items:
            story_button = ttk.Button(
                header,
                text="Writing story..." if controller.loading_story else "✍ Practice story",
                style="Accent.TButton",
                command=controller.generate_story,
            )
            story_button.pack(side="right")
            if controller.loading_story:
                story_button.state(["disabled"])

        self._render_story()

        if not items:
            empty = ttk.Frame(self.body, padding=40)
            empty.pack()
            ttk.Label(empty, text="Your wordbook is empty.", foreground=MUTED, font=("Helvetica", 16)).pack()
            ttk.Button(empty, text="Explore words", command=lambda: controller.show_view(View.SEARCH)).pack(pady=12)
            return

        grid = ttk.Frame(self.body, padding=(20, 10))
        grid.pack(fill="both", expand=True)
        for column in range(self.COLUMNS):
            grid.columnconfigure(column, weight=1, uniform="cards")

        for position, item in enumerate(items):
            card = ttk.Frame(grid, style="Panel.TFrame", padding=10)
            card.grid(row=position // self.COLUMNS, column=position % self.COLUMNS, sticky="nsew", padx=6, pady=6)

            photo = self.app.photos.get(item.image_url, (280, 210))
            if photo is not None:
                ttk.Label(card, image=photo, style="Panel.TLabel").pack()
            else:
                ttk.Label(card, text="[image missing]", style="Panel.TLabel", foreground=MUTED).pack(pady=30)

            row = ttk.Frame(card, style="Panel.TFrame")
            row.pack(fill="x", pady=(8, 0))
            ttk.Label(row, text=item.word, style="Panel.TLabel", font=("Georgia", 16, "bold")).pack(side="left")
            ttk.Button(row, text="🗑", width=3,
                       command=lambda item_id=item.id: controller.remove_saved(item_id)).pack(side="right")
            ttk.Label(card, text=item.definition, style="Panel.TLabel", wraplength=260,
                      foreground=MUTED).pack(anchor="w", pady=(4, 0))

    def _render_story(self) -> None:
        controller = self.controller
        if controller.loading_story:
            LoadingSpinner(self.body, text="Weaving your words into a story...").pack(pady=20)
            return
        if controller.story_error:
            ttk.Label(self.body, text=controller.story_error, foreground="#ff8a80").pack(pady=10)
        story = controller.story
        if story is None:
            return

        panel = ttk.Frame(self.body, style="Panel.TFrame", padding=16)
        panel.pack(fill="x", padx=20, pady=10)
        top = ttk.Frame(panel, style="Panel.TFrame")
        top.pack(fill="x")
        ttk.Label(top, text=story.title, style="Panel.TLabel", font=("Georgia", 20, "bold")).pack(side="left")
        ttk.Button(top, text="✕", width=2, command=controller.dismiss_story).pack(side="right")
        ttk.Label(panel, text="Click a blank to reveal the word.", style="Panel.TLabel",
                  foreground=MUTED).pack(anchor="w", pady=(4, 8))

        text = StoryText(panel, controller)
        text.pack(fill="x")
        text.render()

        if story.words_used:
            ttk.Label(panel, text="Words practiced: " + ", ".join(story.words_used), style="Panel.TLabel",
                      foreground=ACCENT).pack(anchor="w", pady=(8, 0))


def main() -> None:
    logger.banner("LexiMind - Starting Application")
    app = LexiMindApp()
    app.mainloop()


if __name__ == "__main__":
    main()
