from PySide6.QtCore import Qt
from PySide6.QtWidgets import QDialog, QLabel, QScrollArea, QVBoxLayout, QWidget
from matplotlib.backends.backend_qtagg import FigureCanvasQTAgg as FigureCanvas
from matplotlib.figure import Figure

from taskman_app.core.task_manager import TaskManager
from taskman_app.models.data_models import Tag, tag_color
from taskman_app.models.theme import Theme

BACKGROUND = '#1e1e2e'
TEXT = '#cdd6f4'
MUTED = '#bac2de'
GRID = '#45475a'


class StatsWindow(QDialog):
    def __init__(self, task_manager: TaskManager, theme: Theme, parent=None):
        super().__init__(parent)
        self.task_manager = task_manager
        self.theme = theme

        self.setWindowTitle("Statistics - Task Manager")
        self.resize(640, 760)
        self.setStyleSheet(f"background-color: {BACKGROUND}; color: {TEXT};")

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setStyleSheet("border: none;")
        container = QWidget()
        scroll.setWidget(container)

        self.layout = QVBoxLayout(container)
        self.layout.setSpacing(30)
        self.layout.setContentsMargins(20, 20, 20, 20)

        main_layout = QVBoxLayout(self)
        main_layout.addWidget(scroll)

        self.init_header()
        self.init_tag_chart()
        self.init_completion_chart()

    def init_header(self):
        stats = self.task_manager.stats()
        header_text = (f"Progress: {int(stats.progress * 100)}% "
                       f"({stats.completed} done / {stats.total} total, {stats.overdue} overdue)")

        lbl = QLabel(header_text)
        lbl.setStyleSheet(f"font-size: 18px; font-weight: bold; color: {self.theme.accent}; "
                          "padding: 10px; background-color: #313244; border-radius: 8px;")
        lbl.setAlignment(Qt.AlignCenter)
        self.layout.addWidget(lbl)

    def _create_figure(self):
        return Figure(figsize=(6, 4), dpi=100, facecolor=BACKGROUND)

    def _setup_ax(self, ax, title, xlabel, ylabel):
        ax.set_facecolor(BACKGROUND)
        ax.set_title(title, color=TEXT, fontsize=12, pad=15)
        ax.set_xlabel(xlabel, color=MUTED)
        ax.set_ylabel(ylabel, color=MUTED)
        ax.tick_params(axis='x', colors=MUTED, rotation=45)
        ax.tick_params(axis='y', colors=MUTED)
        ax.spines['top'].set_visible(False)
        ax.spines['right'].set_visible(False)
        ax.spines['bottom'].set_color(GRID)
        ax.spines['left'].set_color(GRID)
        ax.grid(color=GRID, linestyle='--', linewidth=0.5, alpha=0.5)

    def init_tag_chart(self):
        counts = self.task_manager.tag_counts()
        # Known tags in their fixed order, then anything unrecognised found on disk
        labels = [tag.value for tag in Tag if tag.value in counts]
        labels += sorted(name for name in counts if name not in labels)
        values = [counts[name] for name in labels]
        colors = [tag_color(Tag.parse(name)) for name in labels]

        fig = self._create_figure()
        canvas = FigureCanvas(fig)
        ax = fig.add_subplot(111)
        bars = ax.bar(labels, values, color=colors, width=0.6, alpha=0.85)
        self._setup_ax(ax, "Tasks per Tag", "Tag", "Tasks")

        for bar in bars:
            height = bar.get_height()
            if height > 0:
                ax.text(bar.get_x() + bar.get_width() / 2., height, f'{int(height)}',
                        ha='center', va='bottom', color=TEXT, fontsize=8)
        fig.tight_layout()
        self.layout.addWidget(canvas)

    def init_completion_chart(self):
        stats = self.task_manager.stats()
        if stats.total == 0:
            lbl = QLabel("No tasks yet.")
            lbl.setAlignment(Qt.AlignCenter)
            self.layout.addWidget(lbl)
            return

        fig = self._create_figure()
        canvas = FigureCanvas(fig)
        ax = fig.add_subplot(111)
        ax.pie([stats.completed, stats.pending], labels=["Completed", "Pending"],
               autopct='%1.1f%%', startangle=90,
               colors=[self.theme.primary, GRID],
               textprops=dict(color=TEXT))
        ax.set_title("Completion", color=TEXT, fontsize=12)
        fig.tight_layout()
        self.layout.addWidget(canvas)
