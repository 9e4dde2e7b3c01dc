import asyncio
from datetime import timedelta

from lingua_spark.core.session_manager import now_utc
from lingua_spark.modules.flashcards.state import FlashcardManager, FlashcardSession


class Recorder:
    def __init__(self):
        self.ids = []

    async def __call__(self, word_id):
        self.ids.append(word_id)


async def test_flip_reports_review_once_per_card(sample_words):
    reviews = Recorder()
    session = FlashcardSession(words=sample_words, on_review=reviews, flip_delay=0)

    await session.flip()
    await session.flip()
    await session.flip()

    assert reviews.ids == ["w0"]
    assert session.to_state().reviewed_count == 1


async def test_back_face_only_visible_when_flipped(sample_words):
    session = FlashcardSession(words=sample_words, flip_delay=0)

    front = session.to_state().card
    assert front.definition is None
    assert front.example_sentence is None

    back = (await session.flip()).card
    assert back.definition == "拿鐵"


async def test_navigation_wraps_and_resets_flip(sample_words):
    session = FlashcardSession(words=sample_words, flip_delay=0)

    state = await session.previous()
    assert state.index == len(sample_words) - 1
    assert state.card.term == "receipt"

    await session.flip()
    state = await session.next()
    assert state.index == 0
    assert state.is_flipped is False


class Owner:
    """Stands in for the collection store."""

    def __init__(self, words):
        self.words = {w.id: w.model_copy() for w in words}
        self.toggled = []

    async def load_words(self):
        return [w.model_copy() for w in self.words.values()]

    async def toggle_learned(self, word_id):
        self.toggled.append(word_id)
        word = self.words.get(word_id)
        if word is None:
            return None
        word.learned = not word.learned
        return word.model_copy()


async def test_mark_learned_takes_flag_from_owner(sample_words):
    owner = Owner(sample_words)
    session = FlashcardSession(
        words=list(sample_words),
        load_words=owner.load_words,
        on_mark_learned=owner.toggle_learned,
        flip_delay=0,
    )

    state = await session.mark_learned()
    assert state.card.learned is True
    assert owner.words["w0"].learned is True
    # The words handed in at start are never touched
    assert sample_words[0].learned is False

    # Toggled elsewhere while the session is open
    owner.words["w0"].learned = False
    state = await session.mark_learned()
    assert state.card.learned is True
    assert owner.words["w0"].learned is True
    assert owner.toggled == ["w0", "w0"]


async def test_mark_learned_without_owner_updates_words_in_place(sample_words):
    session = FlashcardSession(words=sample_words, flip_delay=0)

    state = await session.mark_learned()

    assert state.card.learned is True
    assert sample_words[0].learned is True


async def test_words_deleted_by_owner_drop_out(sample_words):
    owner = Owner(sample_words)
    reviews = Recorder()
    session = FlashcardSession(
        words=list(sample_words),
        load_words=owner.load_words,
        on_review=reviews,
        flip_delay=0,
    )
    await session.next()
    await session.flip()

    del owner.words["w1"]
    state = await session.refresh()

    assert state.total == 3
    assert state.index == 1
    assert state.card.term == "espresso"
    assert state.is_flipped is False

    # Deleting a card before it is shown keeps the current one
    del owner.words["w0"]
    state = await session.refresh()
    assert state.card.term == "espresso"
    assert state.index == 0
    assert reviews.ids == ["w1"]


async def test_flip_back_happens_before_the_delay(sample_words):
    session = FlashcardSession(words=sample_words, flip_delay=0.05)
    await session.flip()

    task = asyncio.create_task(session.next())
    await asyncio.sleep(0.01)

    # Front face right away; the index only changes once the delay is over
    assert session.is_flipped is False
    assert session.to_state().index == 0
    assert session.current.term == "latte"
    assert not task.done()

    state = await task
    assert state.index == 1
    assert state.card.term == "barista"


async def test_empty_collection_is_a_no_op():
    reviews = Recorder()
    session = FlashcardSession(words=[], on_review=reviews, flip_delay=0)

    for action in (session.flip, session.next, session.previous, session.mark_learned):
        state = await action()
        assert state.empty is True
        assert state.card is None
    assert reviews.ids == []


async def test_navigation_sees_collection_changes(sample_words):
    words = list(sample_words)
    manager = FlashcardManager()
    session = manager.start_session(words, flip_delay=0)

    await session.next()
    await session.next()
    del words[1:]
    # Index is clamped to the shrunk collection on read
    assert session.current.term == "latte"

    state = await session.next()
    assert state.total == 1
    assert state.card.term == "latte"


async def test_reported_index_stays_within_collection(sample_words):
    words = list(sample_words)
    session = FlashcardSession(words=words, flip_delay=0)
    await session.next()
    await session.next()

    del words[1:]
    state = session.to_state()

    assert state.total == 1
    assert state.index == 0


def test_idle_sessions_are_swept(sample_words):
    manager = FlashcardManager()
    stale = manager.start_session(sample_words, flip_delay=0)
    fresh = manager.start_session(sample_words, flip_delay=0)
    stale.last_activity = now_utc() - timedelta(minutes=30)

    dropped = manager.sweep()

    assert dropped == [stale.id]
    assert manager.get_session(stale.id) is None
    assert manager.get_session(fresh.id) is fresh


def test_lookup_keeps_session_alive(sample_words):
    manager = FlashcardManager()
    session = manager.start_session(sample_words, flip_delay=0)
    session.last_activity = now_utc() - timedelta(minutes=30)

    assert manager.get_session(session.id) is session
    assert manager.sweep() == []
