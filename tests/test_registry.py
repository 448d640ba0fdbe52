from hitproc.detector import Hit, TerminationReason
from hitproc.registry import AppendResult, HitRegistry


def make_hit(ch=0, start=0):
    return Hit(ch, start, start + 5, 1000, 10.0, TerminationReason.BELOW_THRESHOLD)


def test_append_until_full():
    reg = HitRegistry(2)
    assert reg.append(make_hit(start=0)) is AppendResult.ACCEPTED
    assert not reg.full
    assert reg.append(make_hit(start=10)) is AppendResult.ACCEPTED
    assert reg.full
    assert reg.append(make_hit(start=20)) is AppendResult.CAPACITY_EXCEEDED
    assert len(reg) == 2
    assert reg.dropped == 1
    assert [h.start for h in reg] == [0, 10]


def test_hits_is_a_copy_and_channel_filter():
    reg = HitRegistry(5)
    reg.append(make_hit(ch=0, start=0))
    reg.append(make_hit(ch=1, start=3))
    reg.hits.clear()
    assert len(reg) == 2
    assert [h.start for h in reg.for_channel(1)] == [3]
