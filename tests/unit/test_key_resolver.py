"""Tests for modal key resolution."""

from __future__ import annotations

from lazydata.core.commands import Command, CommandKind, CursorMove, PendingOperation, ScrollAmount
from lazydata.core.input_context import Focus
from lazydata.core.key_resolver import ModalInputResolver, ResolverState, resolve_key, resolve_overlay
from lazydata.core.keys import KeyKind, KeyPress
from lazydata.core.vim import EditorMode, VimMode


def press(key: str) -> KeyPress:
    """Build a key press the way Textual reports it."""
    specials = {"space": " "}
    if key in specials:
        return KeyPress(key=key, character=specials[key])
    if len(key) == 1:
        return KeyPress.char(key)
    return KeyPress(key=key)


def make_resolver(mode: EditorMode | None = None) -> ModalInputResolver:
    return ModalInputResolver(ResolverState(mode or EditorMode.normal()))


def feed(resolver: ModalInputResolver, keys: str, focus: Focus = Focus.EDITOR, tab: int = 0) -> list[Command | None]:
    return [resolver.resolve(press(k), focus, tab) for k in keys]


class TestGlobalKeys:
    def test_ctrl_q_quits_from_every_focus(self):
        for focus in Focus:
            resolver = make_resolver(EditorMode.insert())
            assert resolver.resolve(press("ctrl+q"), focus, 0) == Command(CommandKind.QUIT)

    def test_tab_toggles_focus_even_in_insert_mode(self):
        resolver = make_resolver(EditorMode.insert())
        assert resolver.resolve(press("tab"), Focus.EDITOR, 0) == Command(CommandKind.TOGGLE_FOCUS)

    def test_f5_executes_query(self):
        resolver = make_resolver()
        assert resolver.resolve(press("f5"), Focus.TABLE, 0) == Command(CommandKind.EXECUTE_QUERY)

    def test_q_and_question_mark_outside_insert_mode(self):
        resolver = make_resolver()
        assert resolver.resolve(press("q"), Focus.SIDEBAR, 0) == Command(CommandKind.QUIT)
        assert resolver.resolve(press("?"), Focus.EDITOR, 0) == Command(CommandKind.SHOW_KEY_MAP)

    def test_q_is_text_in_insert_mode(self):
        resolver = make_resolver(EditorMode.insert())
        assert resolver.resolve(press("q"), Focus.EDITOR, 0) == Command(CommandKind.EDITOR_INPUT_CHAR, "q")
        assert resolver.resolve(press("?"), Focus.EDITOR, 0) == Command(CommandKind.EDITOR_INPUT_CHAR, "?")

    def test_global_key_clears_pending_operator(self):
        resolver = make_resolver()
        feed(resolver, "d")
        assert resolver.mode == EditorMode.pending("d")
        resolver.resolve(press("tab"), Focus.EDITOR, 0)
        assert resolver.mode == EditorMode.normal()
        assert resolver.pending_key is None

    def test_non_press_events_resolve_to_none(self):
        release = KeyPress(key="j", character="j", kind=KeyKind.RELEASE)
        for focus in Focus:
            state = ResolverState()
            next_state, command = resolve_key(state, release, focus, 0)
            assert command is None
            assert next_state is state


class TestNormalMode:
    def test_motion_keys(self):
        resolver = make_resolver()
        commands = feed(resolver, "hjklwebG$0")
        moves = [c.payload for c in commands]
        assert moves == [
            CursorMove.BACK,
            CursorMove.DOWN,
            CursorMove.UP,
            CursorMove.FORWARD,
            CursorMove.WORD_FORWARD,
            CursorMove.WORD_END,
            CursorMove.WORD_BACK,
            CursorMove.BOTTOM,
            CursorMove.END,
            CursorMove.HEAD,
        ]
        assert resolver.mode == EditorMode.normal()

    def test_gg_moves_to_top(self):
        resolver = make_resolver()
        first, second = feed(resolver, "gg")
        assert first is None
        assert resolver.pending_key is None
        assert second == Command(CommandKind.EDITOR_MOVE_CURSOR, CursorMove.TOP)

    def test_g_followed_by_other_key_is_noop(self):
        resolver = make_resolver()
        _, second = feed(resolver, "gx")
        assert second == Command(CommandKind.NOOP)
        assert resolver.pending_key is None

    def test_g_after_abandoned_g_starts_fresh_sequence(self):
        resolver = make_resolver()
        commands = feed(resolver, "gxg")
        assert commands == [None, Command(CommandKind.NOOP), None]
        assert resolver.pending_key == "g"
        assert resolver.mode == EditorMode.normal()
        assert feed(resolver, "g") == [Command(CommandKind.EDITOR_MOVE_CURSOR, CursorMove.TOP)]
        assert resolver.pending_key is None

    def test_insert_entry_keys(self):
        expected = {
            "i": Command(CommandKind.EDITOR_SET_MODE, EditorMode.insert()),
            "a": Command(CommandKind.EDITOR_MOVE_CURSOR, CursorMove.FORWARD),
            "A": Command(CommandKind.EDITOR_MOVE_CURSOR, CursorMove.END),
            "I": Command(CommandKind.EDITOR_MOVE_CURSOR, CursorMove.HEAD),
            "o": Command(CommandKind.EDITOR_OPEN_LINE, True),
            "O": Command(CommandKind.EDITOR_OPEN_LINE, False),
            "C": Command(CommandKind.EDITOR_DELETE_LINE_BY_END),
        }
        for key, command in expected.items():
            resolver = make_resolver()
            assert resolver.resolve(press(key), Focus.EDITOR, 0) == command
            assert resolver.mode == EditorMode.insert()

    def test_simple_normal_keys(self):
        resolver = make_resolver()
        assert resolver.resolve(press("x"), Focus.EDITOR, 0) == Command(CommandKind.EDITOR_DELETE_NEXT_CHAR)
        assert resolver.resolve(press("u"), Focus.EDITOR, 0) == Command(CommandKind.EDITOR_UNDO)
        assert resolver.resolve(press("ctrl+r"), Focus.EDITOR, 0) == Command(CommandKind.EDITOR_REDO)
        assert resolver.resolve(press("ctrl+d"), Focus.EDITOR, 0) == Command(
            CommandKind.EDITOR_SCROLL, ScrollAmount.HALF_PAGE_DOWN
        )
        assert resolver.resolve(press("ctrl+e"), Focus.EDITOR, 0) == Command(
            CommandKind.EDITOR_SCROLL_RELATIVE, (1, 0)
        )

    def test_unmapped_key_is_noop(self):
        resolver = make_resolver()
        assert resolver.resolve(press("z"), Focus.EDITOR, 0) == Command(CommandKind.NOOP)


class TestOperators:
    def test_operator_enters_pending_mode(self):
        resolver = make_resolver()
        command = resolver.resolve(press("d"), Focus.EDITOR, 0)
        assert command == Command(CommandKind.EDITOR_SET_MODE, EditorMode.pending("d"))
        assert resolver.mode.mode is VimMode.OPERATOR
        assert resolver.pending_key == "d"

    def test_operator_plus_motion(self):
        resolver = make_resolver()
        _, command = feed(resolver, "dw")
        assert command == Command(
            CommandKind.EDITOR_PERFORM_PENDING_OPERATOR,
            PendingOperation("d", CursorMove.WORD_FORWARD),
        )
        assert resolver.mode == EditorMode.normal()
        assert resolver.pending_key is None

    def test_doubled_operator_operates_on_line(self):
        for op in "yd":
            resolver = make_resolver()
            _, command = feed(resolver, op * 2)
            assert command == Command(CommandKind.EDITOR_OPERATE_LINE, op)
            assert resolver.mode == EditorMode.normal()

    def test_cc_enters_insert_mode(self):
        resolver = make_resolver()
        _, command = feed(resolver, "cc")
        assert command == Command(CommandKind.EDITOR_OPERATE_LINE, "c")
        assert resolver.mode == EditorMode.insert()

    def test_operator_with_invalid_key_returns_to_normal(self):
        resolver = make_resolver()
        _, command = feed(resolver, "yz")
        assert command == Command(CommandKind.NOOP)
        assert resolver.mode == EditorMode.normal()
        assert resolver.pending_key is None


class TestInsertMode:
    def test_printable_characters_become_input(self):
        resolver = make_resolver(EditorMode.insert())
        commands = feed(resolver, "jk ")
        assert [c.payload for c in commands] == ["j", "k", " "]

    def test_escape_and_ctrl_c_return_to_normal(self):
        for key in ("escape", "ctrl+c"):
            resolver = make_resolver(EditorMode.insert())
            command = resolver.resolve(press(key), Focus.EDITOR, 0)
            assert command == Command(CommandKind.EDITOR_SET_MODE, EditorMode.normal())
            assert resolver.mode == EditorMode.normal()

    def test_editing_keys(self):
        resolver = make_resolver(EditorMode.insert())
        assert resolver.resolve(press("backspace"), Focus.EDITOR, 0) == Command(CommandKind.EDITOR_INPUT_BACKSPACE)
        assert resolver.resolve(press("enter"), Focus.EDITOR, 0) == Command(CommandKind.EDITOR_INPUT_ENTER)
        assert resolver.resolve(press("delete"), Focus.EDITOR, 0) == Command(CommandKind.EDITOR_INPUT_DELETE)


class TestVisualMode:
    def test_v_starts_selection(self):
        resolver = make_resolver()
        assert resolver.resolve(press("v"), Focus.EDITOR, 0) == Command(CommandKind.EDITOR_START_SELECTION)
        assert resolver.mode == EditorMode.visual()

    def test_visual_motion_keeps_mode(self):
        resolver = make_resolver(EditorMode.visual())
        assert resolver.resolve(press("l"), Focus.EDITOR, 0) == Command(
            CommandKind.EDITOR_MOVE_CURSOR, CursorMove.FORWARD
        )
        assert resolver.mode == EditorMode.visual()

    def test_visual_y_and_d(self):
        resolver = make_resolver(EditorMode.visual())
        assert resolver.resolve(press("y"), Focus.EDITOR, 0) == Command(CommandKind.EDITOR_COPY_SELECTION)
        assert resolver.mode == EditorMode.normal()
        resolver = make_resolver(EditorMode.visual())
        assert resolver.resolve(press("d"), Focus.EDITOR, 0) == Command(CommandKind.EDITOR_CUT_SELECTION)
        assert resolver.mode == EditorMode.normal()

    def test_visual_c_cuts_and_enters_insert(self):
        resolver = make_resolver(EditorMode.visual())
        assert resolver.resolve(press("c"), Focus.EDITOR, 0) == Command(CommandKind.EDITOR_CUT_SELECTION)
        assert resolver.mode == EditorMode.insert()

    def test_escape_cancels_selection(self):
        resolver = make_resolver(EditorMode.visual())
        assert resolver.resolve(press("escape"), Focus.EDITOR, 0) == Command(CommandKind.EDITOR_CANCEL_SELECTION)
        assert resolver.mode == EditorMode.normal()

    def test_visual_gg_keeps_visual_mode(self):
        resolver = make_resolver(EditorMode.visual())
        _, command = feed(resolver, "gg")
        assert command == Command(CommandKind.EDITOR_MOVE_CURSOR, CursorMove.TOP)
        assert resolver.mode == EditorMode.visual()


class TestTableKeys:
    def test_digits_set_tab_index(self):
        resolver = make_resolver()
        assert resolver.resolve(press("1"), Focus.TABLE, 0) == Command(CommandKind.TABLE_SET_TAB_INDEX, 0)
        assert resolver.resolve(press("9"), Focus.TABLE, 0) == Command(CommandKind.TABLE_SET_TAB_INDEX, 8)

    def test_row_keys_depend_on_active_tab(self):
        resolver = make_resolver()
        assert resolver.resolve(press("j"), Focus.TABLE, 0) == Command(CommandKind.TABLE_NEXT_ROW)
        assert resolver.resolve(press("j"), Focus.TABLE, 2) == Command(CommandKind.TABLE_NEXT_HISTORY_ROW)
        assert resolver.resolve(press("up"), Focus.TABLE, 2) == Command(CommandKind.TABLE_PREVIOUS_HISTORY_ROW)

    def test_table_commands(self):
        resolver = make_resolver()
        expected = {
            "]": CommandKind.TABLE_NEXT_TAB,
            "[": CommandKind.TABLE_PREVIOUS_TAB,
            "space": CommandKind.TABLE_NEXT_PAGE,
            "pageup": CommandKind.TABLE_PREVIOUS_PAGE,
            "g": CommandKind.TABLE_JUMP_TO_FIRST_ROW,
            "G": CommandKind.TABLE_JUMP_TO_LAST_ROW,
            "y": CommandKind.TABLE_COPY_SELECTED_CELL,
            "Y": CommandKind.TABLE_COPY_SELECTED_ROW,
            "R": CommandKind.TABLE_RUN_SELECTED_HISTORY_QUERY,
        }
        for key, kind in expected.items():
            assert resolver.resolve(press(key), Focus.TABLE, 0) == Command(kind)

    def test_unmapped_table_key_is_none(self):
        resolver = make_resolver()
        assert resolver.resolve(press("z"), Focus.TABLE, 0) is None

    def test_table_focus_drops_pending_operator(self):
        resolver = make_resolver()
        feed(resolver, "d")
        resolver.resolve(press("j"), Focus.TABLE, 0)
        assert resolver.mode == EditorMode.normal()


class TestSidebarKeys:
    def test_sidebar_keys(self):
        resolver = make_resolver()
        assert resolver.resolve(press("enter"), Focus.SIDEBAR, 0) == Command(CommandKind.SIDEBAR_TOGGLE_SELECTED)
        assert resolver.resolve(press("space"), Focus.SIDEBAR, 0) == Command(CommandKind.SIDEBAR_TOGGLE_SELECTED)
        assert resolver.resolve(press("h"), Focus.SIDEBAR, 0) == Command(CommandKind.SIDEBAR_KEY_LEFT)
        assert resolver.resolve(press("escape"), Focus.SIDEBAR, 0) == Command(CommandKind.SIDEBAR_DESELECT)
        assert resolver.resolve(press("pagedown"), Focus.SIDEBAR, 0) == Command(CommandKind.SIDEBAR_SCROLL_DOWN, 3)


class TestOverlayKeys:
    def test_overlay_table(self):
        assert resolve_overlay(press("escape")) == Command(CommandKind.CLOSE_POPUP)
        assert resolve_overlay(press("?")) == Command(CommandKind.CLOSE_POPUP)
        assert resolve_overlay(press("j")) == Command(CommandKind.KEY_MAP_SCROLL_DOWN)
        assert resolve_overlay(press("k")) == Command(CommandKind.KEY_MAP_SCROLL_UP)

    def test_overlay_ignores_other_keys(self):
        assert resolve_overlay(press("ctrl+q")) is None
        assert resolve_overlay(press("x")) is None
