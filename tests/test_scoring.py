"""
Tests for the compatibility scorer: component rules, weighting,
missing-data handling and the rationale strings.
"""

import pytest

from setlist_studio.core.scoring import (
    MIN_COMPONENT_WEIGHT,
    CompatibilityScorer,
    ScoringWeights,
    describe_difficulty,
    describe_genre,
    describe_key,
    describe_tempo,
    difficulty_component,
    genre_component,
    key_component,
    score_compatibility,
    tempo_component,
)


@pytest.fixture
def scorer():
    return CompatibilityScorer()


@pytest.fixture
def billie_jean(song_factory):
    return song_factory(song_id=1, genre="Pop", tempo_bpm=117, musical_key="F#m", difficulty_rating=3)


class TestComponents:

    def test_genre_match_is_trimmed_and_case_insensitive(self):
        assert genre_component(" pop ", "POP") == 1.0
        assert genre_component("Pop", "Jazz") == 0.0

    @pytest.mark.parametrize("ref, cand", [(None, "Pop"), ("Pop", None), ("", "Pop"), ("  ", "Pop")])
    def test_genre_missing_scores_zero(self, ref, cand):
        assert genre_component(ref, cand) == 0.0

    def test_tempo_decays_linearly_to_zero_at_sixty(self):
        assert tempo_component(120, 120) == 1.0
        assert tempo_component(120, 150) == pytest.approx(0.5)
        assert tempo_component(120, 180) == 0.0
        assert tempo_component(120, 250) == 0.0

    @pytest.mark.parametrize("ref, cand", [(None, 120), (120, None), (0, 120), (120, -5)])
    def test_tempo_missing_scores_zero(self, ref, cand):
        assert tempo_component(ref, cand) == 0.0

    def test_key_omitted_when_either_side_missing(self):
        assert key_component(None, "C") is None
        assert key_component("C", "") is None
        assert key_component("c", " C ") == 1.0
        assert key_component("C", "F#") == 0.0

    def test_difficulty_decays_linearly_to_zero_at_four(self):
        assert difficulty_component(3, 3) == 1.0
        assert difficulty_component(3, 4) == pytest.approx(0.75)
        assert difficulty_component(1, 5) == 0.0
        assert difficulty_component(None, 5) == 0.0


class TestScoringScenarios:

    def test_closer_genre_and_tempo_scores_higher(self, scorer, billie_jean, song_factory):
        smooth_criminal = song_factory(song_id=2, genre="Pop", tempo_bpm=125, musical_key="G", difficulty_rating=4)
        take_five = song_factory(song_id=4, genre="Jazz", tempo_bpm=176, musical_key="Bb", difficulty_rating=4)

        a = scorer.score(billie_jean, smooth_criminal)
        b = scorer.score(billie_jean, take_five)

        assert a.score == pytest.approx(70.3)
        assert b.score == pytest.approx(15.6)
        assert a.score > b.score

    def test_smaller_bpm_difference_scores_higher(self, scorer, billie_jean, song_factory):
        near = song_factory(genre="Pop", tempo_bpm=125, musical_key="G", difficulty_rating=3)
        far = song_factory(genre="Pop", tempo_bpm=176, musical_key="G", difficulty_rating=3)
        assert scorer.score(billie_jean, near).score > scorer.score(billie_jean, far).score

    def test_smaller_difficulty_difference_scores_higher(self, scorer, billie_jean, song_factory):
        near = song_factory(genre="Pop", tempo_bpm=117, musical_key="G", difficulty_rating=4)
        far = song_factory(genre="Pop", tempo_bpm=117, musical_key="G", difficulty_rating=5)
        assert scorer.score(billie_jean, near).score > scorer.score(billie_jean, far).score

    def test_same_key_scores_higher(self, scorer, song_factory):
        reference = song_factory(musical_key="C")
        same = song_factory(song_id=2, musical_key="C")
        other = song_factory(song_id=3, musical_key="F#")
        assert scorer.score(reference, same).score > scorer.score(reference, other).score

    def test_same_genre_scores_higher(self, scorer, song_factory):
        reference = song_factory(genre="Rock")
        same = song_factory(song_id=2, genre="rock")
        other = song_factory(song_id=3, genre="Jazz")
        assert scorer.score(reference, same).score > scorer.score(reference, other).score

    @pytest.mark.parametrize("attr, values", [
        ("tempo_bpm", [120, 121, 130, 150, 179, 180, 240]),
        ("difficulty_rating", [3, 4, 5]),
    ])
    def test_scores_never_increase_as_difference_grows(self, scorer, song_factory, attr, values):
        reference = song_factory(tempo_bpm=120, difficulty_rating=3)
        scores = [scorer.score(reference, song_factory(song_id=2, **{attr: v})).score for v in values]
        assert scores == sorted(scores, reverse=True)

    def test_identical_songs_score_one_hundred(self, scorer, song_factory):
        song = song_factory()
        assert scorer.score(song, song_factory(song_id=2)).score == pytest.approx(100.0)

    def test_opposite_songs_score_zero(self, scorer, song_factory):
        reference = song_factory(genre="Pop", tempo_bpm=40, musical_key="C", difficulty_rating=1)
        candidate = song_factory(song_id=2, genre="Metal", tempo_bpm=250, musical_key="F#", difficulty_rating=5)
        assert scorer.score(reference, candidate).score == 0.0


class TestMissingData:

    def test_missing_key_redistributes_weight(self, scorer, song_factory):
        reference = song_factory(musical_key="C")
        candidate = song_factory(song_id=2, musical_key=None)

        result = scorer.score(reference, candidate)

        # tempo + genre + difficulty all perfect, key dropped from the sum
        assert result.score == pytest.approx(100.0)
        assert len(result.details) == 3
        assert not any(line.startswith("Key:") for line in result.details)

    def test_missing_bpm_counts_as_zero_tempo(self, scorer, song_factory):
        reference = song_factory(tempo_bpm=None)
        candidate = song_factory(song_id=2)

        result = scorer.score(reference, candidate)

        assert result.score == pytest.approx(65.0)
        assert result.details[0] == "Tempo: ?→120 BPM, tempo unknown"

    def test_everything_missing_still_explains(self, scorer, song_factory):
        reference = song_factory(genre=None, tempo_bpm=None, musical_key=None, difficulty_rating=None)
        candidate = song_factory(song_id=2, genre=None, tempo_bpm=None, musical_key=None, difficulty_rating=None)

        result = scorer.score(reference, candidate)

        assert result.score == 0.0
        assert len(result.details) == 3

    @pytest.mark.parametrize("rating", [0, -2, 6, 10])
    def test_out_of_range_difficulty_counts_as_missing(self, scorer, song_factory, rating):
        reference = song_factory(difficulty_rating=3)
        out_of_range = song_factory(song_id=2, difficulty_rating=rating)
        unknown = song_factory(song_id=3, difficulty_rating=None)

        result = scorer.score(reference, out_of_range)

        # tempo + genre + key perfect, difficulty contributes nothing
        assert result.score == pytest.approx(80.0)
        assert result.score == scorer.score(reference, unknown).score
        assert result.details[-1] == "Difficulty: 3→?, difficulty unknown"

    @pytest.mark.parametrize("ref, cand", [(0, 3), (3, 0), (6, 3), (3, 6)])
    def test_out_of_range_difficulty_component_scores_zero(self, ref, cand):
        assert difficulty_component(ref, cand) == 0.0


class TestDetails:

    def test_details_follow_fixed_order(self, scorer, billie_jean, song_factory):
        candidate = song_factory(song_id=2, genre="Pop", tempo_bpm=125, musical_key="G", difficulty_rating=4)

        details = scorer.score(billie_jean, candidate).details

        assert [line.split(":")[0] for line in details] == ["Tempo", "Genre", "Key", "Difficulty"]
        assert details[0] == "Tempo: 117→125 BPM, difference of 8 (smooth flow)"
        assert details[1] == "Genre: both Pop, match"
        assert details[3] == "Difficulty: 3→4, close match"

    @pytest.mark.parametrize("ref, cand, expected", [
        (117, 125, "smooth flow"),
        (100, 125, "moderate change"),
        (117, 176, "noticeable jump"),
    ])
    def test_tempo_qualifier(self, ref, cand, expected):
        assert describe_tempo(ref, cand).endswith(f"({expected})")

    def test_related_genres_are_called_out(self):
        assert describe_genre("Rock", "Alternative") == "Genre: Rock→Alternative, related shift"
        assert describe_genre("Pop", "Jazz") == "Genre: Pop→Jazz, genre shift"
        assert describe_genre(None, "Jazz") == "Genre: ?→Jazz, genre unknown"

    @pytest.mark.parametrize("ref, cand, expected", [
        ("C", "c", "Key: both c, match"),
        ("C", "G", "Key: C→G, harmonically compatible"),
        ("Am", "C", "Key: Am→C, harmonically compatible"),
        ("F#", "Gb", "Key: F#→Gb, enharmonic equivalent"),
        ("C", "F#", "Key: C→F#, distant transition"),
    ])
    def test_key_relationship(self, ref, cand, expected):
        assert describe_key(ref, cand) == expected

    @pytest.mark.parametrize("ref, cand, expected", [
        (3, 3, "Difficulty: both 3/5, consistent"),
        (4, 3, "Difficulty: 4→3, close match"),
        (3, 5, "Difficulty: 3→5, moderate increase"),
        (5, 1, "Difficulty: 5→1, large decrease"),
        (None, 2, "Difficulty: ?→2, difficulty unknown"),
        (0, 3, "Difficulty: ?→3, difficulty unknown"),
        (3, 6, "Difficulty: 3→?, difficulty unknown"),
    ])
    def test_difficulty_phrasing(self, ref, cand, expected):
        assert describe_difficulty(ref, cand) == expected

    def test_harmonic_notes_do_not_change_score(self, scorer, song_factory):
        reference = song_factory(musical_key="C")
        neighbour = song_factory(song_id=2, musical_key="G")
        distant = song_factory(song_id=3, musical_key="F#")
        assert scorer.score(reference, neighbour).score == scorer.score(reference, distant).score


class TestConfiguration:

    def test_weights_must_sum_to_one(self):
        with pytest.raises(ValueError):
            ScoringWeights(tempo=0.5)

    def test_weights_must_be_non_negative(self):
        with pytest.raises(ValueError):
            ScoringWeights(tempo=0.55, genre=-0.2, key=0.45, difficulty=0.2)

    def test_zero_weight_is_rejected(self):
        with pytest.raises(ValueError):
            ScoringWeights(tempo=0.55, genre=0.0, key=0.25, difficulty=0.20)

    def test_weight_below_rounding_step_is_rejected(self):
        with pytest.raises(ValueError):
            ScoringWeights(tempo=0.3496, genre=0.0004, key=0.45, difficulty=0.20)

    def test_smallest_allowed_weight_still_separates_candidates(self, song_factory):
        weights = ScoringWeights(tempo=0.345, genre=MIN_COMPONENT_WEIGHT, key=0.45, difficulty=0.20)
        scorer = CompatibilityScorer(weights=weights)
        reference = song_factory(genre="Rock")
        same = scorer.score(reference, song_factory(song_id=2, genre="Rock"))
        other = scorer.score(reference, song_factory(song_id=3, genre="Jazz"))

        assert same.score > other.score

    @pytest.mark.parametrize("tempo, difficulty", [(0, 4), (60, 0), (-1, 4)])
    def test_decay_must_be_positive(self, tempo, difficulty):
        with pytest.raises(ValueError):
            CompatibilityScorer(tempo_decay_bpm=tempo, difficulty_decay=difficulty)

    def test_custom_weights(self, song_factory):
        genre_heavy = CompatibilityScorer(weights=ScoringWeights(tempo=0.01, genre=0.97, key=0.01, difficulty=0.01))
        reference = song_factory(genre="Pop", tempo_bpm=60)
        assert genre_heavy.score(reference, song_factory(song_id=2, genre="pop", tempo_bpm=200)).score == pytest.approx(99.0)
        assert genre_heavy.score(reference, song_factory(song_id=3, genre="Jazz", tempo_bpm=60)).score == pytest.approx(3.0)

    def test_module_level_helper_uses_defaults(self, billie_jean, song_factory):
        candidate = song_factory(song_id=2, genre="Pop", tempo_bpm=125, musical_key="G", difficulty_rating=4)
        assert score_compatibility(billie_jean, candidate) == CompatibilityScorer().score(billie_jean, candidate)
