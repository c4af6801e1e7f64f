from leximind.models import SavedItem, StoryQuiz
from leximind.story import StoryBoard, StorySegment, candidate_words, parse_story


def test_parse_story_splits_blanks():
    assert parse_story("The {{cat}} sat on the {{mat}}.") == [
        StorySegment("The "),
        StorySegment("cat", is_blank=True),
        StorySegment(" sat on the "),
        StorySegment("mat", is_blank=True),
        StorySegment("."),
    ]


def test_parse_story_adjacent_blanks_and_edges():
    segments = parse_story("{{uno}}{{dos}}")
    assert segments == [StorySegment("uno", True), StorySegment("dos", True)]


def test_parse_story_without_blanks():
    assert parse_story("Just text.") == [StorySegment("Just text.")]


def test_candidate_words_are_distinct_in_order():
    items = [
        SavedItem(word="gato", image_url="a", definition=""),
        SavedItem(word="perro", image_url="b", definition=""),
        SavedItem(word="gato", image_url="c", definition=""),
    ]
    assert candidate_words(items) == ["gato", "perro"]


def test_story_board_reveal_is_one_way():
    board = StoryBoard(StoryQuiz(title="T", content="A {{b}} c {{d}}", words_used=["b", "d"]))
    assert board.blank_indices == [1, 3]
    assert not board.all_revealed

    assert board.reveal(1)
    assert board.reveal(1)
    assert board.is_revealed(1)
    assert not board.reveal(0)
    assert not board.reveal(99)

    board.reveal(3)
    assert board.all_revealed
