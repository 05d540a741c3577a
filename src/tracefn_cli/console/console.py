"""
Flexoki-themed Console class for Rich library
Uses the warm, inky Flexoki color scheme by Steph Ango
https://stephango.com/flexoki
"""

import os
from typing import Optional

from rich.console import Console as RichConsole
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

from tracefn_core.models import TraceFnConfig

# Flexoki color palette (dark theme - 400 series)
COLORS_DARK = {
    'tx_3': '#B7B5AC',
    'tx_2': '#CECDC3',
    'tx': '#E6E4D9',
    'ui_2': '#403E3C',
    'red': '#D14D41',
    'orange': '#DA702C',
    'yellow': '#D0A215',
    'green': '#879A39',
    'cyan': '#3AA99F',
    'blue': '#4385BE',
    'magenta': '#CE5D97',
}

# Flexoki color palette (light theme - 600 series)
COLORS_LIGHT = {
    'tx_3': '#6F6E69',
    'tx_2': '#403E3C',
    'tx': '#100F0F',
    'ui_2': '#DAD8CE',
    'red': '#AF3029',
    'orange': '#BC5215',
    'yellow': '#AD8301',
    'green': '#66800B',
    'cyan': '#24837B',
    'blue': '#205EA6',
    'magenta': '#A02F6F',
}


class Console:
    """
    A themed console wrapper using the Flexoki color scheme.
    Provides styled messages, panels and highlighted source output.
    """

    @staticmethod
    def detect_terminal_background(config: TraceFnConfig = None):
        """
        Detect if the terminal has a light or dark background.
        Returns 'dark' or 'light'.

        Detection methods:
        1. Check TraceFnConfig theme setting
        2. Check COLORFGBG environment variable
        3. Default to 'dark'
        """
        if config is not None and config.theme is not None:
            return config.theme

        # Format is "foreground;background", 7 and 15 are light backgrounds
        colorfgbg = os.environ.get('COLORFGBG', '')
        if colorfgbg:
            parts = colorfgbg.split(';')
            if len(parts) >= 2:
                try:
                    if int(parts[-1]) in (7, 15):
                        return 'light'
                except ValueError:
                    pass

        return 'dark'

    def __init__(self, theme_mode=None, config: TraceFnConfig = None):
        """
        Initialize the console with Flexoki theme.

        Args:
            theme_mode: Optional theme mode ('light' or 'dark').
                       If None, auto-detects based on config or terminal background.
            config: Optional TraceFnConfig instance for loading theme from configuration.
        """
        if config is None:
            config = TraceFnConfig()

        if theme_mode is None:
            theme_mode = self.detect_terminal_background(config)

        self.theme_mode = theme_mode
        self.COLORS = COLORS_LIGHT if theme_mode == 'light' else COLORS_DARK

        self.theme = Theme(
            {
                'default': self.COLORS['tx'],
                'muted': self.COLORS['tx_2'],
                'faint': self.COLORS['tx_3'],
                'success': f'bold {self.COLORS["green"]}',
                'info': self.COLORS['cyan'],
                'warning': f'bold {self.COLORS["orange"]}',
                'error': f'bold {self.COLORS["red"]}',
                'highlight': f'bold {self.COLORS["yellow"]}',
                'code': self.COLORS['magenta'],
            }
        )

        self.console = RichConsole(theme=self.theme)

    def print(self, *args, style=None, **kwargs):
        """Print with optional style."""
        self.console.print(*args, style=style, **kwargs)

    def _icon_and_text(self, message: str, icon: str, icon_style: str):
        grid = Table.grid(padding=(0, 1), expand=False)
        grid.add_column(width=1)
        grid.add_column()
        grid.add_row(Text(icon, style=icon_style), Text(message))
        return grid

    def success(self, message: str, prefix: str = '✓'):
        """Print a success message."""
        self.print(self._icon_and_text(message, prefix, 'success'))

    def info(self, message: str, prefix: str = 'ℹ'):
        """Print an info message."""
        self.print(self._icon_and_text(message, prefix, 'info'))

    def warning(self, message: str, prefix: str = '⚠'):
        """Print a warning message."""
        self.print(self._icon_and_text(message, prefix, 'warning'))

    def error(self, message: str, prefix: str = '✗'):
        """Print an error message."""
        self.print(self._icon_and_text(message, prefix, 'error'))

    def muted(self, message: str):
        self.print(Text(message), style='muted')

    def faint(self, message: str):
        self.print(Text(message), style='faint')

    def highlight(self, message: str):
        self.print(Text(message), style='highlight')

    def action(self, message: str, style: str = 'faint'):
        """Print a highlighted action."""
        self.print(f'[{style}]▣[/{style}] {escape(message)}')
        self.newline()

    def panel(self, content, title: str = None, border_style: str = None):
        """Display content in a panel."""
        self.console.print(
            Panel(
                content,
                title=escape(title) if title else None,
                border_style=border_style or self.COLORS['ui_2'],
                title_align='left',
            )
        )

    def source(self, code: str, title: Optional[str] = None, start_line: int = 1):
        """Display Python source with syntax highlighting."""
        syntax = Syntax(
            code,
            'python',
            theme='monokai',
            line_numbers=True,
            start_line=start_line,
            word_wrap=True,
        )
        if title:
            self.panel(syntax, title=title)
        else:
            self.console.print(syntax)

    def newline(self, count: int = 1):
        """Print newlines."""
        self.console.print('\n' * (count - 1))
