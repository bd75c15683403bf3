from datetime import date

from app.core.timeutils import calculate_age
from app.core.trust import calculate_trust_score, trust_label

def test_new_user_starts_at_full_trust():
    assert calculate_trust_score([], 0) == 100

def test_missed_event_costs_twenty_points():
    assert calculate_trust_score([], 1) == 80
    assert calculate_trust_score([], 3) == 40

def test_score_is_floored_at_zero():
    assert calculate_trust_score([], 5) == 0
    assert calculate_trust_score([], 12) == 0

def test_average_rating_scales_base():
    assert calculate_trust_score([5, 5], 0) == 100
    assert calculate_trust_score([4, 5], 0) == 90
    assert calculate_trust_score([1], 0) == 20

def test_half_points_round_up():
    # 37 / 8 * 20 == 92.5
    assert calculate_trust_score([5, 5, 5, 5, 5, 4, 4, 4], 0) == 93
    # 7 / 4 * 20 == 35.0, 9 / 8 * 20 == 22.5
    assert calculate_trust_score([2, 2, 2, 1], 0) == 35
    assert calculate_trust_score([2, 1, 1, 1, 1, 1, 1, 1], 0) == 23

def test_reviews_and_missed_events_combine():
    assert calculate_trust_score([4], 1) == 60

def test_custom_penalty():
    assert calculate_trust_score([], 2, penalty=10) == 80

def test_trust_labels():
    assert trust_label(100) == "Elite"
    assert trust_label(90) == "Elite"
    assert trust_label(89) == "Trusted"
    assert trust_label(70) == "Trusted"
    assert trust_label(40) == "Fair"
    assert trust_label(39) == "Caution"
    assert trust_label(0) == "Caution"

def test_calculate_age_before_and_after_birthday():
    today = date(2024, 6, 15)
    assert calculate_age(date(2000, 6, 15), today) == 24
    assert calculate_age(date(2000, 6, 16), today) == 23
    assert calculate_age(None, today) is None
