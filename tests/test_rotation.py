import pytest

from schemas import Ad
from widgets.rotation import AdRotationStore, RotationTimer


def make_ads(n):
    return [Ad(id=str(i), title=f"Ad {i}") for i in range(n)]


def test_store_starts_loading_and_empty():
    store = AdRotationStore()
    assert store.loading
    assert store.current is None
    assert len(store) == 0


def test_replace_resets_cursor_and_does_not_accumulate():
    store = AdRotationStore()
    ads = make_ads(3)
    store.replace(ads)
    store.advance()
    store.advance()
    assert store.index == 2

    store.replace(ads)

    assert store.index == 0
    assert not store.loading
    assert list(store.ads) == ads


def test_replace_copies_the_list():
    store = AdRotationStore()
    ads = make_ads(2)
    store.replace(ads)
    ads.append(Ad(id="x", title="late"))
    assert len(store) == 2


@pytest.mark.parametrize("n", [2, 3, 5])
def test_advance_wraps_modulo_length(n):
    store = AdRotationStore()
    store.replace(make_ads(n))
    for k in range(1, 2 * n + 1):
        assert store.advance() == k % n
        assert 0 <= store.index < n


def test_single_ad_never_moves():
    store = AdRotationStore()
    store.replace(make_ads(1))
    store.advance()
    assert store.index == 0


def test_select_bounds():
    store = AdRotationStore()
    store.replace(make_ads(3))
    store.select(2)
    assert store.current.id == "2"
    with pytest.raises(IndexError):
        store.select(3)
    with pytest.raises(IndexError):
        store.select(-1)


def test_timer_idle_for_single_ad(scheduler):
    store = AdRotationStore()
    timer = RotationTimer(store, 5000, scheduler, "t-1")
    store.replace(make_ads(1))
    timer.sync()

    assert not timer.active
    assert scheduler.get_job("t-1") is None


def test_timer_schedules_interval_job(scheduler):
    store = AdRotationStore()
    timer = RotationTimer(store, 4000, scheduler, "t-2")
    store.replace(make_ads(2))
    timer.sync()

    job = scheduler.get_job("t-2")
    assert timer.active
    assert job is not None
    assert job.trigger.interval.total_seconds() == 4


@pytest.mark.asyncio
async def test_timer_goes_idle_when_list_shrinks(scheduler):
    store = AdRotationStore()
    timer = RotationTimer(store, 5000, scheduler, "t-3")
    store.replace(make_ads(3))
    timer.sync()
    tick = scheduler.get_job("t-3").func

    store.replace(make_ads(1))
    timer.sync()

    assert scheduler.get_job("t-3") is None
    await tick()
    assert store.index == 0


@pytest.mark.asyncio
async def test_tick_after_stop_is_noop(scheduler):
    store = AdRotationStore()
    timer = RotationTimer(store, 5000, scheduler, "t-4")
    store.replace(make_ads(3))
    timer.sync()
    await timer.tick()
    assert store.index == 1

    timer.stop()
    await timer.tick()

    assert store.index == 1
    timer.stop()
