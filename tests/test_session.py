from leximind.session import Gallery, WordSession


def test_gallery_append_makes_new_image_active():
    gallery = Gallery()
    assert gallery.current is None
    gallery.append("a.png")
    gallery.append("b.png")
    assert gallery.active_index == 1
    assert gallery.current == "b.png"
    assert len(gallery) == 2


def test_gallery_select_bounds():
    gallery = Gallery(images=["a.png", "b.png"], active_index=1)
    assert gallery.select(0)
    assert gallery.current == "a.png"
    assert not gallery.select(2)
    assert not gallery.select(-1)
    assert gallery.active_index == 0


def test_feedback_toggles_per_image():
    session = WordSession()
    session.gallery.append("a.png")

    assert session.toggle_feedback("like") == "like"
    assert session.current_feedback == "like"
    assert session.toggle_feedback("dislike") == "dislike"
    assert session.toggle_feedback("dislike") is None
    assert session.current_feedback is None

    session.toggle_feedback("like")
    session.gallery.append("b.png")
    assert session.current_feedback is None
    session.gallery.select(0)
    assert session.current_feedback == "like"


def test_feedback_without_image_does_nothing():
    session = WordSession()
    assert session.toggle_feedback("like") is None
    assert session.feedback == {}


def test_variation_context_depends_on_gallery_size():
    session = WordSession()
    session.gallery.append("a.png")
    assert session.variation_context() == "Abstract and colorful interpretation"
    session.gallery.append("b.png")
    assert session.variation_context() == "Real world scenario usage"
