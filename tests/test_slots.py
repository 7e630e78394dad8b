from barbershop.services.availability.slots import intervals_overlap, minutes_to_time, time_to_minutes


def test_time_to_minutes():
    assert time_to_minutes("00:00") == 0
    assert time_to_minutes("09:30") == 570
    assert time_to_minutes("23:59") == 1439


def test_time_to_minutes_malformed_is_zero():
    assert time_to_minutes(None) == 0
    assert time_to_minutes("") == 0
    assert time_to_minutes("abc") == 0


def test_minutes_to_time_pads():
    assert minutes_to_time(570) == "09:30"
    assert minutes_to_time(5) == "00:05"
    assert time_to_minutes(minutes_to_time(1095)) == 1095


def test_touching_intervals_do_not_overlap():
    assert not intervals_overlap(600, 30, 630, 30)
    assert not intervals_overlap(630, 30, 600, 30)


def test_overlapping_and_nested_intervals():
    assert intervals_overlap(600, 30, 615, 30)
    assert intervals_overlap(600, 120, 630, 15)
    assert intervals_overlap(630, 15, 600, 120)
