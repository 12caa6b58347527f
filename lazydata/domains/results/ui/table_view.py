"""Results panel: tab strip, paginated data grid, messages and query history."""

from __future__ import annotations

from rich import box
from rich.console import Group, RenderableType
from rich.style import Style
from rich.table import Table
from rich.text import Text
from textual.widgets import Static

from lazydata.domains.results.app.table_model import (
    DATA_TAB,
    HISTORY_HEADERS,
    HISTORY_TAB,
    LoadingKind,
    ResultTableModel,
)

ROW_NUMBER_HEADER = "#"
HISTORY_QUERY_WIDTH = 60


def render_tabs(model: ResultTableModel) -> Text:
    text = Text()
    for index, title in enumerate(model.tabs.titles):
        if index:
            text.append(" │ ", style="grey50")
        style = Style(bold=True, underline=True, color=model.palette.selected_fg) if index == model.tabs.index else Style()
        text.append(f"{index + 1}:{title}", style=style)
    return text


def render_data_table(model: ResultTableModel) -> RenderableType:
    if model.loading_state.kind is LoadingKind.LOADING:
        return Text("Loading...", style="italic")
    if not model.headers:
        return Text("No rows.", style="grey50")

    palette = model.palette
    table = Table(
        box=box.SIMPLE_HEAD,
        show_edge=False,
        pad_edge=False,
        header_style=Style(color=palette.header_fg, bgcolor=palette.header_bg, bold=True),
    )
    page_start = model.current_page * model.page_size
    number_width = max(len(str(page_start + len(model.page_rows()))), len(ROW_NUMBER_HEADER)) + 2
    table.add_column(ROW_NUMBER_HEADER, width=number_width, no_wrap=True, justify="right")
    visible = model.visible_columns()
    for _, header, width in visible:
        table.add_column(Text(header), width=width, no_wrap=True, overflow="ellipsis")

    for page_index, row in enumerate(model.page_rows_text()):
        is_selected_row = page_index == model.selected_row
        row_style = Style(bgcolor=palette.alt_row_bg) if page_index % 2 else Style()
        if is_selected_row:
            row_style = Style(color=palette.selected_fg, bold=True)
        cells: list[RenderableType] = []
        number = Text(str(page_start + page_index + 1))
        if is_selected_row and model.selected_column == 0:
            number.stylize(Style(reverse=True))
        cells.append(number)
        for display_index, (data_index, _, _) in enumerate(visible, start=1):
            cell = Text(row[data_index] if data_index < len(row) else "")
            if is_selected_row and model.selected_column == display_index:
                cell.stylize(Style(reverse=True))
            cells.append(cell)
        table.add_row(*cells, style=row_style)
    return Group(table, Text(model.info_line(), style="grey62"))


def render_messages(model: ResultTableModel) -> RenderableType:
    if model.loading_state.kind is LoadingKind.ERROR:
        return Text(model.status_message or "", style="bold red")
    return Text(model.message or "")


def render_history(model: ResultTableModel) -> RenderableType:
    if not model.history:
        return Text("No queries yet.", style="grey50")
    palette = model.palette
    table = Table(
        box=box.SIMPLE_HEAD,
        show_edge=False,
        header_style=Style(color=palette.header_fg, bgcolor=palette.header_bg, bold=True),
    )
    for header in HISTORY_HEADERS:
        if header == "Query":
            table.add_column(header, max_width=HISTORY_QUERY_WIDTH, no_wrap=True, overflow="ellipsis")
        else:
            table.add_column(header, no_wrap=True)
    for index, values in enumerate(model.history_rows_text()):
        style = Style(color=palette.selected_fg, bold=True, reverse=True) if index == model.history_selected else None
        status = Text(values[2], style="green" if values[2] == "OK" else "red")
        query = Text(values[0].replace("\n", " "))
        table.add_row(query, Text(values[1]), status, Text(values[3]), Text(values[4]), style=style)
    return table


def render_results(model: ResultTableModel) -> RenderableType:
    body: RenderableType
    if model.tabs.index == DATA_TAB:
        body = render_data_table(model)
    elif model.tabs.index == HISTORY_TAB:
        body = render_history(model)
    else:
        body = render_messages(model)
    return Group(render_tabs(model), Text(""), body)


class ResultsView(Static):
    DEFAULT_CSS = """
    ResultsView {
        height: 1fr;
        padding: 0 1;
    }
    """

    can_focus = False

    def __init__(self, model: ResultTableModel, **kwargs) -> None:
        super().__init__("", **kwargs)
        self.model = model

    def refresh_model(self) -> None:
        self.update(render_results(self.model))
