"""
Language Coach - Tkinter desktop app

Tabs:
1. Setup: model/language settings, learning goal, generate a study plan.
2. Lessons: basics, example sentences with audio, exercises with answer
   checking, "Explain" and "More exercises" actions.
3. Audio practice: a personal sentence list read aloud at normal or slow
   speed by the TTS endpoint.

Setup (from repo root):

    python -m venv .venv
    source .venv/bin/activate   # or .venv\\Scripts\\activate on Windows
    pip install -e .

Optionally create a .env with OPENAI_API_KEY=sk-... to prefill the key.

Then run:
    python main.py
"""

import os
import shutil
import tkinter as tk
from tkinter import ttk, filedialog
from typing import Callable, Dict, List, Optional, Tuple

from coach.logger import logger

# Audio playback support
try:
    import pygame
    pygame.mixer.init()
    AUDIO_AVAILABLE = True
except ImportError:
    AUDIO_AVAILABLE = False
    logger.warning("pygame not installed. Audio playback will be disabled.")
except Exception as e:
    AUDIO_AVAILABLE = False
    logger.warning(f"No audio device available ({e}). Audio playback will be disabled.")

from coach.api import (
    create_practice_sentence, explain_lesson, generate_plan, generate_practice_sentences, request_exercises,
)
from coach.config import DATA_DIR, DEFAULT_TTS_VOICE, NORMAL_SPEED, SLOW_SPEED, TTS_VOICES
from coach.demo_plan import build_demo_plan
from coach.errors import CoachError
from coach.models import Exercise, Lesson, PracticeSentence, Settings, StudyPlan
from coach.practice import answer_in_options, check_answer, download_name, sentences_from_plan
from coach.speech import Voice, list_voices, resolve_voice, speak_to_file
from coach.storage import AppState, LocalStore
from coach.tasks import ActionSlot, run_in_background
from coach.tts import AudioCache, generate_speech

logger.banner("Language Coach - Starting Application")


def error_text(error: Exception, default: str) -> str:
    return str(error) if isinstance(error, CoachError) and str(error) else f"{default} ({error})"


# ---------------------------------------------------------------------------
# Scrollable frame
# ---------------------------------------------------------------------------

class ScrollableFrame(ttk.Frame):
    """A frame whose `inner` child scrolls vertically."""

    def __init__(self, parent, **kwargs) -> None:
        super().__init__(parent, **kwargs)
        self.canvas = tk.Canvas(self, highlightthickness=0)
        scrollbar = ttk.Scrollbar(self, orient="vertical", command=self.canvas.yview)
        self.inner = ttk.Frame(self.canvas)
        self.inner.bind("<Configure>", lambda e: self.canvas.configure(scrollregion=self.canvas.bbox("all")))
        self._window = self.canvas.create_window((0, 0), window=self.inner, anchor="nw")
        self.canvas.bind("<Configure>", lambda e: self.canvas.itemconfigure(self._window, width=e.width))
        self.canvas.configure(yscrollcommand=scrollbar.set)
        self.canvas.pack(side="left", fill="both", expand=True)
        scrollbar.pack(side="right", fill="y")

    def clear(self) -> None:
        for child in self.inner.winfo_children():
            child.destroy()
        self.canvas.yview_moveto(0)


# ---------------------------------------------------------------------------
# Toast notifications
# ---------------------------------------------------------------------------

class ToastStack(ttk.Frame):
    """Transient messages stacked at the bottom of the window. Click one to dismiss it."""

    COLORS = {"info": "#7bb3ff", "success": "#3fb37f", "error": "#e5534b", "loading": "#c9a227", "warning": "#d9822b"}

    def __init__(self, parent, **kwargs) -> None:
        super().__init__(parent, **kwargs)
        self._labels: Dict[int, tk.Label] = {}
        self._next_id = 0

    def push(self, message: str, variant: str = "info", persist: bool = False) -> int:
        toast_id = self._next_id
        self._next_id += 1
        label = tk.Label(self, text=message, fg="white", bg=self.COLORS.get(variant, "#555"),
                         padx=10, pady=4, anchor="w")
        label.pack(fill="x", pady=1)
        label.bind("<Button-1>", lambda e, i=toast_id: self.dismiss(i))
        self._labels[toast_id] = label
        if not persist and variant != "loading":
            self.after(3200, lambda: self.dismiss(toast_id))
        return toast_id

    def update_toast(self, toast_id: int, message: str, variant: str = "info") -> None:
        label = self._labels.get(toast_id)
        if label is None:
            self.push(message, variant)
            return
        label.configure(text=message, bg=self.COLORS.get(variant, "#555"))
        if variant != "loading":
            self.after(2600, lambda: self.dismiss(toast_id))

    def dismiss(self, toast_id: int) -> None:
        label = self._labels.pop(toast_id, None)
        if label is not None:
            label.destroy()


# ---------------------------------------------------------------------------
# Audio playback
# ---------------------------------------------------------------------------

class AudioPlayer:
    """Plays one mp3 at a time through pygame."""

    def __init__(self) -> None:
        self.active: Optional[Tuple[str, str]] = None   # (sentence id, speed label)

    def play(self, path: str, active: Optional[Tuple[str, str]] = None) -> bool:
        if not AUDIO_AVAILABLE or not os.path.exists(path):
            return False
        self.stop()
        pygame.mixer.music.load(path)
        pygame.mixer.music.play()
        self.active = active
        logger.ui(f"Playing {path}")
        return True

    def is_playing(self) -> bool:
        return AUDIO_AVAILABLE and pygame.mixer.music.get_busy()

    def stop(self) -> None:
        if AUDIO_AVAILABLE:
            pygame.mixer.music.stop()
            pygame.mixer.music.unload()
        self.active = None


# ---------------------------------------------------------------------------
# Setup tab
# ---------------------------------------------------------------------------

class SetupTab(ttk.Frame):
    FIELDS = [
        ("api_key", "API key"),
        ("model", "Model"),
        ("base_url", "Base URL"),
        ("user_language", "Your language"),
        ("target_language", "Learning language"),
    ]

    def __init__(self, parent, app: "LanguageCoachApp") -> None:
        super().__init__(parent, padding=16)
        self.app = app
        self.vars: Dict[str, tk.StringVar] = {}

        form = ttk.LabelFrame(self, text="Model & language settings", padding=10)
        form.pack(fill="x")
        for row, (attr, label) in enumerate(self.FIELDS):
            ttk.Label(form, text=label).grid(row=row, column=0, sticky="w", pady=2)
            var = tk.StringVar(value=getattr(app.app_state.settings.value, attr))
            entry = ttk.Entry(form, textvariable=var, width=60, show="•" if attr == "api_key" else "")
            entry.grid(row=row, column=1, sticky="ew", pady=2)
            self.vars[attr] = var
            if attr == "api_key":
                self.key_entry = entry
                self.show_button = ttk.Button(form, text="Show", width=6, command=self._toggle_key)
                self.show_button.grid(row=row, column=2, padx=(6, 0))
        form.columnconfigure(1, weight=1)
        ttk.Button(form, text="Save settings", command=self.save_settings).grid(
            row=len(self.FIELDS), column=1, sticky="e", pady=(8, 0))

        goal_frame = ttk.LabelFrame(self, text="What do you want to achieve?", padding=10)
        goal_frame.pack(fill="both", expand=True, pady=(12, 0))
        self.goal_text = tk.Text(goal_frame, height=4, wrap="word")
        self.goal_text.insert("1.0", app.app_state.goal.value)
        self.goal_text.pack(fill="x")

        actions = ttk.Frame(goal_frame)
        actions.pack(fill="x", pady=8)
        self.generate_button = ttk.Button(actions, text="Generate new plan", command=self.generate)
        self.generate_button.pack(side="left")
        ttk.Button(actions, text="Use demo data", command=self.reset).pack(side="left", padx=6)
        self.status = ttk.Label(actions, text="Data is stored locally on this computer.", foreground="#7bb3ff")
        self.status.pack(side="left", padx=12)

        self.steps_label = ttk.Label(goal_frame, text="", justify="left", wraplength=700)
        self.steps_label.pack(fill="x")
        self.refresh_plan()

    def _toggle_key(self) -> None:
        hidden = self.key_entry.cget("show") != ""
        self.key_entry.configure(show="" if hidden else "•")
        self.show_button.configure(text="Hide" if hidden else "Show")

    def read_settings(self) -> Settings:
        return Settings(**{attr: var.get().strip() for attr, var in self.vars.items()})

    def save_settings(self) -> Settings:
        settings = self.read_settings()
        if not self.app.app_state.settings.set(settings):
            self.app.toasts.push("Settings could not be saved to disk.", "error")
        self.app.app_state.goal.set(self.goal_text.get("1.0", "end").strip())
        return settings

    def refresh_plan(self) -> None:
        plan = self.app.app_state.plan.value
        steps = "\n".join(f"{i}. {step}" for i, step in enumerate(plan.steps, start=1))
        self.steps_label.configure(
            text=f"{plan.title}  ({len(plan.lessons)} lessons • {len(plan.steps)} steps)\n\n{steps}")

    def generate(self) -> None:
        settings = self.save_settings()
        goal = self.app.app_state.goal.value
        if not settings.has_api_key():
            self.app.toasts.push("Add your API key to generate a custom plan.", "error")
            return

        fallback = build_demo_plan()
        started = run_in_background(
            lambda: generate_plan(goal, settings, fallback),
            self.app.on_ui(lambda plan: self._on_plan(plan, used_fallback=plan is fallback)),
            self.app.on_ui(self._on_plan_error),
            slot=self.app.plan_slot,
        )
        if started:
            self.generate_button.configure(text="Generating...", state="disabled")
            self.status.configure(text="Calling the model for a fresh plan...")

    def _on_plan(self, plan: StudyPlan, used_fallback: bool = False) -> None:
        self.generate_button.configure(text="Generate new plan", state="normal")
        self.app.set_plan(plan)
        if used_fallback:
            self.status.configure(text="The model reply was not a usable plan. Showing the demo plan instead.")
            self.app.toasts.push("Could not read the generated plan, using demo data.", "warning")
            return
        self.status.configure(text="Plan updated with AI output and saved locally.")
        self.app.toasts.push("Plan ready.", "success")

    def _on_plan_error(self, error: Exception) -> None:
        self.generate_button.configure(text="Generate new plan", state="normal")
        self.status.configure(text="")
        self.app.toasts.push(error_text(error, "Failed to reach the model."), "error")

    def reset(self) -> None:
        self.app.app_state.reset_to_defaults()
        settings = self.app.app_state.settings.value
        for attr, var in self.vars.items():
            var.set(getattr(settings, attr))
        self.goal_text.delete("1.0", "end")
        self.goal_text.insert("1.0", self.app.app_state.goal.value)
        self.app.set_plan(self.app.app_state.plan.value)
        self.status.configure(text="Reset to demo data. Your inputs remain local.")


# ---------------------------------------------------------------------------
# Lessons tab
# ---------------------------------------------------------------------------

class LessonsTab(ttk.Frame):
    def __init__(self, parent, app: "LanguageCoachApp") -> None:
        super().__init__(parent, padding=12)
        self.app = app
        self.current_index = 0
        self._voices: Optional[List[Voice]] = None

        self.lesson_list = tk.Listbox(self, width=28, exportselection=False)
        self.lesson_list.pack(side="left", fill="y")
        self.lesson_list.bind("<<ListboxSelect>>", self._on_select)

        right = ttk.Frame(self)
        right.pack(side="left", fill="both", expand=True, padx=(12, 0))

        actions = ttk.Frame(right)
        actions.pack(fill="x")
        self.explain_button = ttk.Button(actions, text="Explain", command=self.explain)
        self.explain_button.pack(side="left")
        self.more_button = ttk.Button(actions, text="More exercises", command=self.more_exercises)
        self.more_button.pack(side="left", padx=6)
        ttk.Button(actions, text="Next lesson →", command=self.next_lesson).pack(side="right")

        self.explanation = ttk.Label(right, text="", wraplength=640, justify="left", foreground="#9fd3ff")
        self.explanation.pack(fill="x", pady=6)

        self.body = ScrollableFrame(right)
        self.body.pack(fill="both", expand=True)
        self.refresh()

    @property
    def lesson(self) -> Optional[Lesson]:
        lessons = self.app.app_state.plan.value.lessons
        if not lessons:
            return None
        return lessons[self.current_index] if self.current_index < len(lessons) else lessons[0]

    def refresh(self) -> None:
        lessons = self.app.app_state.plan.value.lessons
        self.lesson_list.delete(0, "end")
        for i, lesson in enumerate(lessons, start=1):
            self.lesson_list.insert("end", f"{i}. {lesson.title}")
        if self.current_index >= len(lessons):
            self.current_index = 0
        if lessons:
            self.lesson_list.selection_set(self.current_index)
        self.explanation.configure(text="")
        self.render_lesson()

    def _on_select(self, _event=None) -> None:
        selection = self.lesson_list.curselection()
        if selection:
            self.current_index = selection[0]
            self.explanation.configure(text="")
            self.render_lesson()

    def next_lesson(self) -> None:
        count = len(self.app.app_state.plan.value.lessons)
        if self.current_index < count - 1:
            self.current_index += 1
            self.lesson_list.selection_clear(0, "end")
            self.lesson_list.selection_set(self.current_index)
            self.render_lesson()

    def render_lesson(self) -> None:
        self.body.clear()
        lesson = self.lesson
        inner = self.body.inner
        if lesson is None:
            ttk.Label(inner, text="This plan has no lessons yet.").pack(anchor="w")
            return

        ttk.Label(inner, text=lesson.topic.upper(), foreground="#8a8a8a").pack(anchor="w")
        ttk.Label(inner, text=lesson.title, font=("Helvetica", 18, "bold")).pack(anchor="w")
        ttk.Label(inner, text=lesson.summary, wraplength=620, justify="left").pack(anchor="w", pady=(0, 8))

        ttk.Label(inner, text=f"Basics ({len(lesson.basics)})", font=("Helvetica", 12, "bold")).pack(anchor="w")
        for item in lesson.basics:
            ttk.Label(inner, text=f"• {item}", wraplength=620, justify="left").pack(anchor="w")

        ttk.Label(inner, text="Sentences", font=("Helvetica", 12, "bold")).pack(anchor="w", pady=(10, 0))
        for sentence in lesson.sentences:
            row = ttk.Frame(inner, padding=4)
            row.pack(fill="x")
            text = ttk.Frame(row)
            text.pack(side="left", fill="x", expand=True)
            ttk.Label(text, text=sentence.target, font=("Helvetica", 12, "bold")).pack(anchor="w")
            ttk.Label(text, text=sentence.translation).pack(anchor="w")
            if sentence.phonetic:
                ttk.Label(text, text=sentence.phonetic, foreground="#3fb37f").pack(anchor="w")
            ttk.Button(row, text="Play audio" if AUDIO_AVAILABLE else "Audio unavailable",
                       state="normal" if AUDIO_AVAILABLE else "disabled",
                       command=lambda t=sentence.target: self.speak(t)).pack(side="right")

        ttk.Label(inner, text="Exercises", font=("Helvetica", 12, "bold")).pack(anchor="w", pady=(10, 0))
        for exercise in lesson.exercises:
            self._render_exercise(inner, exercise)

    def _render_exercise(self, parent, exercise: Exercise) -> None:
        box = ttk.Frame(parent, padding=6, relief="groove")
        box.pack(fill="x", pady=3)
        ttk.Label(box, text=exercise.type, foreground="#7bb3ff").pack(anchor="w")
        ttk.Label(box, text=exercise.prompt, wraplength=600, justify="left").pack(anchor="w")

        response = tk.StringVar()
        if exercise.options and answer_in_options(exercise):
            for option in exercise.options:
                ttk.Radiobutton(box, text=option, value=option, variable=response).pack(anchor="w")
        elif exercise.answer is not None:
            # Options that do not contain the answer are shown as hints only
            if exercise.options:
                ttk.Label(box, text=" / ".join(exercise.options), foreground="#8a8a8a").pack(anchor="w")
            ttk.Entry(box, textvariable=response, width=40).pack(anchor="w", pady=2)

        if exercise.answer is None:
            return
        result = ttk.Label(box, text="")

        def _check() -> None:
            correct = check_answer(exercise, response.get())
            result.configure(text="✓ Correct" if correct else f"✗ Answer: {exercise.answer}",
                             foreground="#3fb37f" if correct else "#e5534b")

        ttk.Button(box, text="Check", command=_check).pack(anchor="w", pady=2)
        result.pack(anchor="w")

    # --- actions -----------------------------------------------------------

    def _set_busy(self, busy: bool) -> None:
        state = "disabled" if busy else "normal"
        self.explain_button.configure(state=state)
        self.more_button.configure(state=state)

    def more_exercises(self) -> None:
        plan = self.app.app_state.plan.value
        settings = self.app.app_state.settings.value
        index = self.current_index
        toast_id = self.app.toasts.push("Generating more exercises...", "loading")

        def _done(result: Tuple[int, List[Exercise]]) -> None:
            self._set_busy(False)
            lesson_index, new = result
            if not self.app.app_state.append_exercises(plan, lesson_index, new):
                self.app.toasts.update_toast(toast_id, "The plan changed, new exercises were discarded.", "warning")
                return
            self.app.refresh_plan_views()
            self.app.toasts.update_toast(toast_id, f"Added {len(new)} exercises.", "success")

        def _failed(error: Exception) -> None:
            self._set_busy(False)
            self.app.toasts.update_toast(toast_id, error_text(error, "Failed to generate exercises."), "error")

        if run_in_background(lambda: request_exercises(plan, index, settings),
                             self.app.on_ui(_done), self.app.on_ui(_failed), slot=self.app.lesson_slot):
            self._set_busy(True)
        else:
            self.app.toasts.dismiss(toast_id)

    def explain(self) -> None:
        lesson = self.lesson
        if lesson is None:
            return
        settings = self.app.app_state.settings.value
        toast_id = self.app.toasts.push("Explaining this lesson...", "loading")

        def _done(text: str) -> None:
            self._set_busy(False)
            self.explanation.configure(text=text)
            self.app.toasts.update_toast(toast_id, "Lesson explained.", "success")

        def _failed(error: Exception) -> None:
            self._set_busy(False)
            self.app.toasts.update_toast(toast_id, error_text(error, "Failed to explain the lesson."), "error")

        if run_in_background(lambda: explain_lesson(lesson, settings),
                             self.app.on_ui(_done), self.app.on_ui(_failed), slot=self.app.lesson_slot):
            self._set_busy(True)
        else:
            self.app.toasts.dismiss(toast_id)

    def speak(self, text: str) -> None:
        target_language = self.app.app_state.settings.value.target_language

        def _work() -> str:
            if not self._voices:
                self._voices = list_voices()
            voice = resolve_voice(target_language, self._voices)
            if voice is None:
                raise CoachError("No speech voices are available.")
            return speak_to_file(text, voice)

        def _play(path: str) -> None:
            self.app.player.play(path)
            self.app.temp_files.append(path)

        run_in_background(_work, self.app.on_ui(_play),
                          self.app.on_ui(lambda e: self.app.toasts.push(error_text(e, "Playback failed."), "error")),
                          slot=self.app.speech_slot)


# ---------------------------------------------------------------------------
# Audio practice tab
# ---------------------------------------------------------------------------

class AudioPracticeTab(ttk.Frame):
    def __init__(self, parent, app: "LanguageCoachApp") -> None:
        super().__init__(parent, padding=12)
        self.app = app
        self.cache: Optional[AudioCache] = None
        self.voice = tk.StringVar(value=DEFAULT_TTS_VOICE)

        top = ttk.Frame(self)
        top.pack(fill="x")
        self.generate_button = ttk.Button(top, text="Generate 5 sentences", command=self.generate)
        self.generate_button.pack(side="left")
        ttk.Button(top, text="Import from plan", command=self.import_from_plan).pack(side="left", padx=6)
        ttk.Label(top, text="Voice").pack(side="left", padx=(18, 4))
        ttk.Combobox(top, textvariable=self.voice, values=TTS_VOICES, state="readonly", width=10).pack(side="left")

        add_row = ttk.Frame(self)
        add_row.pack(fill="x", pady=8)
        self.add_input = tk.StringVar()
        ttk.Entry(add_row, textvariable=self.add_input, width=60).pack(side="left", fill="x", expand=True)
        self.add_button = ttk.Button(add_row, text="Add", command=self.add)
        self.add_button.pack(side="left", padx=6)

        self.tree = ttk.Treeview(self, columns=("target", "translation", "phonetic"), show="headings", height=14)
        for column, heading in (("target", "Sentence"), ("translation", "Translation"), ("phonetic", "Phonetic")):
            self.tree.heading(column, text=heading)
        self.tree.pack(fill="both", expand=True)

        controls = ttk.Frame(self)
        controls.pack(fill="x", pady=6)
        ttk.Button(controls, text="▶ Normal", command=lambda: self.play("normal")).pack(side="left")
        ttk.Button(controls, text="▶ Slow", command=lambda: self.play("slow")).pack(side="left", padx=6)
        ttk.Button(controls, text="Save mp3", command=self.download).pack(side="left")
        ttk.Button(controls, text="Delete", command=self.delete).pack(side="right")
        self.refresh()

    @property
    def sentences(self) -> List[PracticeSentence]:
        return self.app.app_state.audio_sentences.value

    def _save(self, sentences: List[PracticeSentence]) -> None:
        self.app.app_state.audio_sentences.set(sentences)
        self.refresh()

    def refresh(self) -> None:
        self.tree.delete(*self.tree.get_children())
        for sentence in self.sentences:
            self.tree.insert("", "end", iid=sentence.id,
                             values=(sentence.target, sentence.translation, sentence.phonetic or ""))

    def selected(self) -> Optional[PracticeSentence]:
        selection = self.tree.selection()
        if not selection:
            return None
        return next((s for s in self.sentences if s.id == selection[0]), None)

    # --- lifetime of the audio cache ------------------------------------------

    def activate(self) -> None:
        if self.cache is None:
            self.cache = AudioCache()
            logger.ui("Audio practice opened")

    def deactivate(self) -> None:
        self.app.player.stop()
        if self.cache is not None:
            self.cache.clear()
            self.cache = None
            logger.ui("Audio practice closed, cache cleared")

    # --- actions -------------------------------------------------------------

    def generate(self) -> None:
        settings = self.app.app_state.settings.value

        def _done(new: List[PracticeSentence]) -> None:
            self.generate_button.configure(state="normal")
            self._save(self.sentences + new)
            self.app.toasts.push(f"Added {len(new)} sentences", "success")

        def _failed(error: Exception) -> None:
            self.generate_button.configure(state="normal")
            self.app.toasts.push(error_text(error, "Generation failed."), "error")

        if run_in_background(lambda: generate_practice_sentences(settings),
                             self.app.on_ui(_done), self.app.on_ui(_failed), slot=self.app.practice_slot):
            self.generate_button.configure(state="disabled")

    def import_from_plan(self) -> None:
        try:
            imported = sentences_from_plan(self.app.app_state.plan.value)
        except CoachError as e:
            self.app.toasts.push(str(e), "error")
            return
        self._save(self.sentences + imported)
        self.app.toasts.push(f"Imported {len(imported)} sentences from plan", "success")

    def add(self) -> None:
        text = self.add_input.get().strip()
        if not text:
            return
        settings = self.app.app_state.settings.value

        def _done(sentence: PracticeSentence) -> None:
            self.add_button.configure(state="normal")
            self.add_input.set("")
            self._save(self.sentences + [sentence])

        def _failed(error: Exception) -> None:
            self.add_button.configure(state="normal")
            self.app.toasts.push(error_text(error, "Failed to add sentence."), "error")

        if run_in_background(lambda: create_practice_sentence(text, settings),
                             self.app.on_ui(_done), self.app.on_ui(_failed), slot=self.app.add_slot):
            self.add_button.configure(state="disabled")

    def delete(self) -> None:
        sentence = self.selected()
        if sentence is None:
            return
        if self.app.player.active and self.app.player.active[0] == sentence.id:
            self.app.player.stop()
        self._save([s for s in self.sentences if s.id != sentence.id])

    def _clip(self, sentence: PracticeSentence, speed: float, on_ready: Callable) -> None:
        self.activate()
        settings = self.app.app_state.settings.value
        cache = self.cache
        voice = self.voice.get()

        def _ready(clip) -> None:
            # Tab was left while synthesizing
            if cache is not self.cache:
                clip.release()
                return
            on_ready(clip)

        run_in_background(
            lambda: generate_speech(sentence.target, settings.api_key, settings.base_url, cache, voice, speed),
            self.app.on_ui(_ready),
            self.app.on_ui(lambda e: self.app.toasts.push(error_text(e, "Playback failed."), "error")),
            slot=self.app.audio_slot,
        )

    def play(self, speed_label: str) -> None:
        sentence = self.selected()
        if sentence is None:
            return
        active = (sentence.id, speed_label)
        if self.app.player.active == active and self.app.player.is_playing():
            self.app.player.stop()
            return
        speed = SLOW_SPEED if speed_label == "slow" else NORMAL_SPEED
        self._clip(sentence, speed, lambda clip: self.app.player.play(clip.path, active))

    def download(self) -> None:
        sentence = self.selected()
        if sentence is None:
            return

        def _save_copy(clip) -> None:
            destination = filedialog.asksaveasfilename(
                defaultextension=".mp3", initialfile=download_name(sentence))
            if destination:
                shutil.copyfile(clip.path, destination)
                self.app.toasts.push("Audio saved.", "success")

        self._clip(sentence, NORMAL_SPEED, _save_copy)


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------

class LanguageCoachApp(tk.Tk):
    def __init__(self) -> None:
        super().__init__()
        self.title("Language Coach")
        self.geometry("1000x720")

        self.app_state = AppState(LocalStore(DATA_DIR))
        self.player = AudioPlayer()
        self.temp_files: List[str] = []

        self.plan_slot = ActionSlot("generate_plan")
        self.lesson_slot = ActionSlot("lesson_action")
        self.speech_slot = ActionSlot("speak_sentence")
        self.practice_slot = ActionSlot("generate_practice_sentences")
        self.add_slot = ActionSlot("add_practice_sentence")
        self.audio_slot = ActionSlot("synthesize_audio")

        self.notebook = ttk.Notebook(self)
        self.notebook.pack(fill="both", expand=True)
        self.setup_tab = SetupTab(self.notebook, self)
        self.lessons_tab = LessonsTab(self.notebook, self)
        self.audio_tab = AudioPracticeTab(self.notebook, self)
        self.notebook.add(self.setup_tab, text="Setup")
        self.notebook.add(self.lessons_tab, text="Lessons")
        self.notebook.add(self.audio_tab, text="Audio practice")
        self.notebook.bind("<<NotebookTabChanged>>", self._on_tab_changed)
        self._current_tab = "Setup"

        self.toasts = ToastStack(self)
        self.toasts.pack(fill="x", side="bottom")

        self.protocol("WM_DELETE_WINDOW", self.on_close)

    def on_ui(self, callback: Callable) -> Callable:
        """Wrap a worker-thread callback so it runs on the Tk loop."""
        return lambda *args: self.after(0, lambda: callback(*args))

    def set_plan(self, plan: StudyPlan) -> None:
        if not self.app_state.plan.set(plan):
            self.toasts.push("Plan could not be saved to disk.", "error")
        self.refresh_plan_views()

    def refresh_plan_views(self) -> None:
        self.setup_tab.refresh_plan()
        self.lessons_tab.refresh()

    def _on_tab_changed(self, _event=None) -> None:
        tab = self.notebook.tab(self.notebook.select(), "text")
        logger.ui_transition(self._current_tab, tab)
        if self._current_tab == "Audio practice" and tab != "Audio practice":
            self.audio_tab.deactivate()
        if tab == "Audio practice":
            self.audio_tab.activate()
        self._current_tab = tab

    def on_close(self) -> None:
        self.audio_tab.deactivate()
        self.player.stop()
        for path in self.temp_files:
            try:
                os.remove(path)
            except OSError:
                pass
        self.destroy()


def main() -> None:
    app = LanguageCoachApp()
    app.mainloop()


if __name__ == "__main__":
    main()
