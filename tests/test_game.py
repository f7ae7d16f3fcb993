import pytest

from conftest import make_block
from tetris_game import GameState, MESSAGES, Tetris
from tetris_input import GameEvent, Key
from tetris_piece import COLS, ROWS, SPAWN_ROWS

TICK = GameEvent.tick()


def press(game, *keys):
    for key in keys:
        game.handle(GameEvent.of(key))


@pytest.fixture
def playing(game):
    press(game, Key.PLAY)
    game.current = make_block("T", 0, 10, 5, color="green")
    return game


def test_new_session_waits_in_menu(game, flag):
    assert game.state is GameState.MENU
    assert flag.get() is GameState.MENU
    assert game.points == 0


@pytest.mark.parametrize("key", [Key.DOWN, Key.LEFT, Key.RIGHT, Key.ROTATE, Key.PAUSE])
def test_menu_ignores_everything_but_play(game, renderer, key):
    before = game.current.cells
    game.handle(GameEvent.of(key))
    game.handle(TICK)
    assert game.state is GameState.MENU
    assert game.current.cells == before
    assert renderer.calls == []


def test_play_starts_game(game, renderer, flag):
    press(game, Key.PLAY)
    assert game.state is GameState.PLAYING
    assert flag.is_playing()
    assert renderer.calls == ["clear", "draw"]
    assert renderer.snapshots[-1].state is GameState.PLAYING


@pytest.mark.parametrize("state_keys", [[], [Key.PLAY], [Key.PLAY, Key.PAUSE]])
def test_quit_from_any_state(game, state_keys):
    press(game, *state_keys)
    assert game.handle(GameEvent.of(Key.QUIT)) is False


def test_other_events_keep_running(playing):
    assert playing.handle(GameEvent.of(Key.LEFT)) is True
    assert playing.handle(TICK) is True


def test_pause_toggles(playing, flag, renderer):
    press(playing, Key.PAUSE)
    assert playing.state is GameState.PAUSE
    assert not flag.is_playing()
    assert renderer.snapshots[-1].message == MESSAGES[GameState.PAUSE]
    press(playing, Key.PAUSE)
    assert playing.state is GameState.PLAYING
    assert flag.is_playing()


@pytest.mark.parametrize("event", [GameEvent.of(Key.DOWN), GameEvent.of(Key.LEFT),
                                   GameEvent.of(Key.RIGHT), GameEvent.of(Key.ROTATE),
                                   GameEvent.of(Key.PLAY), TICK])
def test_paused_game_ignores_moves_and_ticks(playing, event):
    press(playing, Key.PAUSE)
    cells = playing.current.cells
    board = [list(row) for row in playing.board]
    playing.handle(event)
    assert playing.state is GameState.PAUSE
    assert playing.current.cells == cells
    assert playing.board == board


def test_play_key_while_playing_does_nothing(playing):
    cells, nxt = playing.current.cells, playing.next
    press(playing, Key.PLAY)
    assert playing.current.cells == cells and playing.next is nxt


def test_moves_commit_and_redraw(playing, renderer):
    drawn = len(renderer.snapshots)
    press(playing, Key.LEFT)
    assert [c.col for c in playing.current.cells] == [4, 3, 5, 4]
    press(playing, Key.RIGHT, Key.RIGHT)
    assert [c.col for c in playing.current.cells] == [6, 5, 7, 6]
    press(playing, Key.DOWN)
    assert playing.current.anchor.row == 11
    press(playing, Key.ROTATE)
    assert playing.current.rotation == 1
    assert len(renderer.snapshots) == drawn + 5


def test_tick_moves_down(playing):
    playing.handle(TICK)
    assert playing.current.anchor.row == 11


def test_blocked_move_is_discarded(playing, renderer):
    playing.board[10][3] = "red"
    playing.board[10][7] = "red"
    drawn = len(renderer.snapshots)
    before = playing.current.cells
    press(playing, Key.LEFT, Key.RIGHT)
    assert playing.current.cells == before
    assert len(renderer.snapshots) == drawn


def test_rotation_into_settled_cell_is_discarded(playing):
    # T rotation 1 needs the cell above the anchor
    playing.board[9][5] = "red"
    press(playing, Key.ROTATE)
    assert playing.current.rotation == 0


def test_left_against_wall_is_discarded(playing):
    playing.current = make_block("T", 3, 10, 0)
    before = playing.current.cells
    press(playing, Key.LEFT)
    assert playing.current.cells == before


def test_blocked_down_settles_and_promotes_next(playing):
    playing.current = make_block("O", 0, ROWS - 1, 0, color="yellow")
    promoted = playing.next
    press(playing, Key.DOWN)
    assert playing.board[ROWS - 1][0] == "yellow"
    assert playing.board[ROWS - 2][1] == "yellow"
    assert playing.current is promoted
    assert playing.next is not promoted
    assert playing.points == 0
    assert playing.state is GameState.PLAYING


def test_settle_on_tick_clears_line_and_scores(playing):
    playing.board[ROWS - 1] = ["red"] * (COLS - 1) + [None]
    playing.board[ROWS - 2][0] = "blue"
    playing.current = make_block("I", 1, ROWS - 2, COLS - 1, color="green")
    playing.handle(TICK)
    assert playing.points == 1
    assert playing.board[0] == [None] * COLS
    assert playing.board[ROWS - 1] == ["blue"] + [None] * (COLS - 2) + ["green"]
    assert not any(all(row) for row in playing.board)


def test_points_are_one_per_line(playing):
    for r in (ROWS - 1, ROWS - 2):
        playing.board[r] = ["red"] * (COLS - 2) + [None, None]
    playing.current = make_block("O", 0, ROWS - 1, COLS - 2)
    press(playing, Key.DOWN)
    assert playing.points == 2
    assert all(cell is None for row in playing.board for cell in row)


def test_lock_reaching_buffer_ends_game(playing, flag, renderer):
    playing.board[SPAWN_ROWS + 1][0] = "red"
    # standing I spans rows 1..4
    playing.current = make_block("I", 1, SPAWN_ROWS - 1, 0)
    press(playing, Key.DOWN)
    assert playing.state is GameState.END_SCREEN
    assert flag.get() is GameState.END_SCREEN
    assert renderer.snapshots[-1].message == MESSAGES[GameState.END_SCREEN]


def test_blocked_spawn_ends_game(playing):
    playing.current = make_block("O", 0, ROWS - 1, 0)
    playing.next = make_block("O", 0, SPAWN_ROWS, COLS // 2)
    playing.board[SPAWN_ROWS][COLS // 2] = "red"
    press(playing, Key.DOWN)
    assert playing.state is GameState.END_SCREEN
    assert playing.points == 0


def test_lock_reaching_row_two_keeps_playing(playing, flag):
    playing.board[SPAWN_ROWS + 2][0] = "red"
    # standing I spans rows 2..5
    playing.current = make_block("I", 1, SPAWN_ROWS, 0)
    promoted = playing.next
    playing.handle(TICK)
    assert playing.board[2][0] is not None
    assert playing.state is GameState.PLAYING
    assert flag.is_playing()
    assert playing.current is promoted


def test_end_screen_frame_matches_board_after_clearing_lock(playing, renderer):
    playing.board[ROWS - 1] = ["red"] * (COLS - 1) + [None]
    # shifts down onto the spawn anchor once the bottom row clears
    playing.board[SPAWN_ROWS - 1][COLS // 2] = "blue"
    playing.next = make_block("O", 0, SPAWN_ROWS, COLS // 2)
    playing.current = make_block("I", 1, ROWS - 2, COLS - 1, color="green")
    playing.handle(TICK)
    assert playing.state is GameState.END_SCREEN
    assert playing.points == 1
    snap = renderer.snapshots[-1]
    assert snap.frame() == [list(row) for row in playing.board[SPAWN_ROWS:]]
    assert snap.frame()[ROWS - 4 - SPAWN_ROWS][COLS - 1] is None


def end_game(game):
    game.board[SPAWN_ROWS + 1][0] = "red"
    game.current = make_block("I", 1, SPAWN_ROWS - 1, 0)
    game.points = 5
    game.handle(TICK)
    assert game.state is GameState.END_SCREEN


def test_end_screen_ignores_moves_and_ticks(playing):
    end_game(playing)
    board = [list(row) for row in playing.board]
    cells = playing.current.cells
    for event in (TICK, GameEvent.of(Key.DOWN), GameEvent.of(Key.LEFT), GameEvent.of(Key.PAUSE)):
        playing.handle(event)
    assert playing.state is GameState.END_SCREEN
    assert playing.board == board
    assert playing.current.cells == cells


def test_play_on_end_screen_restarts_fresh(playing, flag):
    end_game(playing)
    press(playing, Key.PLAY)
    assert playing.state is GameState.PLAYING
    assert flag.is_playing()
    assert playing.points == 0
    assert all(cell is None for row in playing.board for cell in row)


def test_snapshot_frame_shows_visible_rows_with_block(playing):
    playing.board[ROWS - 1][0] = "brown"
    snap = playing.snapshot()
    frame = snap.frame()
    assert len(frame) == ROWS - SPAWN_ROWS
    assert frame[-1][0] == "brown"
    for c in playing.current.cells:
        assert frame[c.row - SPAWN_ROWS][c.col] == "green"
    assert snap.points == playing.points
    assert snap.next_kind == playing.next.kind
    assert len(snap.next_shape) == 4
    assert snap.message == ("", "")


def test_snapshot_is_detached_from_board(playing):
    snap = playing.snapshot()
    playing.board[ROWS - 1][0] = "red"
    assert snap.grid[ROWS - 1][0] is None


def test_runs_without_renderer_or_flag(rng):
    game = Tetris(rng)
    game.handle(GameEvent.of(Key.PLAY))
    game.handle(TICK)
    assert game.state is GameState.PLAYING
