"""Unit tests for filter compilation."""

import pytest

from temporium.core.filters import Operator, Predicate, Term, compile_filter
from temporium.core.models import Game, GameFilter


def make_game(id: int, name: str, **overrides: object) -> Game:
    """Create a test game."""
    fields: dict[str, object] = {
        "id": id,
        "name": name,
        "disk_space": 10.0,
        "ram_usage": 8.0,
        "vram_required": 4.0,
        "genre": "RPG",
        "user_id": 1,
    }
    fields.update(overrides)
    return Game(**fields)  # type: ignore[arg-type]


class TestCompileFilter:
    """Tests for turning a GameFilter into SQL."""

    def test_empty_filter_scopes_owner(self) -> None:
        """Test that an empty filter still restricts to the owner."""
        sql, params = compile_filter(GameFilter(), owner_id=1).to_sql()
        assert sql == "user_id = ?"
        assert params == [1]

    def test_empty_strings_add_nothing(self) -> None:
        """Test that empty genre and tag mean 'no constraint'."""
        predicate = compile_filter(GameFilter(genre="", tag=""), owner_id=1)
        assert len(predicate.terms) == 1

    def test_booleans_become_integers(self) -> None:
        """Test that flag filters bind 0/1."""
        game_filter = GameFilter(completed=True, favorite=False, installed=True)
        sql, params = compile_filter(game_filter, owner_id=3).to_sql()
        assert sql == "user_id = ? AND completed = ? AND is_favorite = ? AND is_installed = ?"
        assert params == [3, 1, 0, 1]
        assert all(type(p) is int for p in params)

    def test_ranges(self) -> None:
        """Test inclusive bounds on the numeric columns."""
        game_filter = GameFilter(disk_space_min=1.0, disk_space_max=50.0, vram_min=2.0)
        sql, params = compile_filter(game_filter, owner_id=1).to_sql()
        assert sql == (
            "user_id = ? AND disk_space >= ? AND disk_space <= ? AND vram_required >= ?"
        )
        assert params == [1, 1.0, 50.0, 2.0]

    def test_tag_uses_case_sensitive_substring(self) -> None:
        """Test that the tag filter is a substring test, not LIKE."""
        sql, params = compile_filter(GameFilter(tag="RPG"), owner_id=1).to_sql()
        assert sql == "user_id = ? AND instr(tags, ?) > 0"
        assert params == [1, "RPG"]

    def test_rating_max_excludes_unrated(self) -> None:
        """Test that an upper rating bound also requires a rating."""
        predicate = compile_filter(GameFilter(rating_max=5), owner_id=1)
        assert predicate.terms[1:] == (
            Term("rating", Operator.LE, 5),
            Term("rating", Operator.GE, 0),
        )

    def test_has_rating(self) -> None:
        """Test both directions of the has_rating flag."""
        rated = compile_filter(GameFilter(has_rating=True), owner_id=1)
        unrated = compile_filter(GameFilter(has_rating=False), owner_id=1)
        assert rated.terms[-1] == Term("rating", Operator.GE, 0)
        assert unrated.terms[-1] == Term("rating", Operator.EQ, -1)

    def test_values_never_inlined(self) -> None:
        """Test that hostile strings stay parameters."""
        hostile = "x' OR '1'='1"
        sql, params = compile_filter(GameFilter(genre=hostile, tag=hostile), owner_id=1).to_sql()
        assert hostile not in sql
        assert "'" not in sql
        assert params == [1, hostile, hostile]


class TestTerm:
    """Tests for individual terms."""

    def test_unknown_column(self) -> None:
        """Test that only whitelisted columns are accepted."""
        with pytest.raises(ValueError, match="Unknown filter column"):
            Term("name; DROP TABLE games", Operator.EQ, 1)

    def test_empty_predicate(self) -> None:
        """Test that a predicate with no terms matches everything."""
        assert Predicate(()).to_sql() == ("1", [])
        assert Predicate(()).matches(make_game(1, "A"))


class TestInMemoryMatching:
    """Tests for evaluating predicates against Game objects."""

    def test_owner_scoping(self) -> None:
        """Test that games of other owners never match."""
        predicate = compile_filter(GameFilter(), owner_id=1)
        assert predicate.matches(make_game(1, "Mine"))
        assert not predicate.matches(make_game(2, "Theirs", user_id=2))

    def test_partial_tag_match(self) -> None:
        """Test that 'RPG' matches a game tagged only 'RPGLike'."""
        predicate = compile_filter(GameFilter(tag="RPG"), owner_id=1)
        assert predicate.matches(make_game(1, "A", tags="RPGLike"))
        assert not predicate.matches(make_game(2, "B", tags="rpg"))

    def test_rating_filters(self) -> None:
        """Test rating bounds against rated and unrated games."""
        unrated = make_game(1, "Unrated", rating=-1)
        low = make_game(2, "Low", rating=3)
        high = make_game(3, "High", rating=9)

        at_most_five = compile_filter(GameFilter(rating_max=5), owner_id=1)
        assert at_most_five.apply([unrated, low, high]) == [low]

        at_least_five = compile_filter(GameFilter(rating_min=5), owner_id=1)
        assert at_least_five.apply([unrated, low, high]) == [high]

        no_rating = compile_filter(GameFilter(has_rating=False), owner_id=1)
        assert no_rating.apply([unrated, low, high]) == [unrated]

    def test_apply_orders_by_name_then_id(self) -> None:
        """Test that apply sorts case-sensitively by name, then id."""
        games = [
            make_game(4, "beta"),
            make_game(3, "Zeta"),
            make_game(2, "Alpha"),
            make_game(1, "Alpha", user_id=1, genre="Action"),
        ]
        result = compile_filter(GameFilter(), owner_id=1).apply(games)
        assert [(g.name, g.id) for g in result] == [
            ("Alpha", 1),
            ("Alpha", 2),
            ("Zeta", 3),
            ("beta", 4),
        ]

    def test_flags(self) -> None:
        """Test boolean filters against game flags."""
        done = make_game(1, "Done", completed=True, is_favorite=True)
        open_ = make_game(2, "Open")
        predicate = compile_filter(GameFilter(completed=True, favorite=True), owner_id=1)
        assert predicate.apply([done, open_]) == [done]
