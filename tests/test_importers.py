"""Tests for the CSV question importer."""
import pytest

from exams.importers import import_questions
from exams.models import Question

pytestmark = pytest.mark.django_db

HEADER = "question_text,category,difficulty,points,options,correct_answer\n"


class TestImportQuestions:

    def test_accepts_bytes_with_bom(self):
        content = ("\ufeff" + HEADER + "Speed of light?,Physics,hard,2,c|2c,A\n").encode('utf-8')
        result = import_questions(content)
        assert result.created == 1
        assert Question.objects.get().points == 2

    def test_negative_points_reported_not_fatal(self):
        content = (
            HEADER
            + "Good row?,General,easy,1,Yes|No,Yes\n"
            + "Bad row?,General,easy,-3,Yes|No,Yes\n"
        ).encode('utf-8')

        result = import_questions(content)

        assert result.created == 1
        assert len(result.errors) == 1
        assert "line 3" in result.errors[0]
        assert "points" in result.errors[0]
        assert not Question.objects.filter(text='Bad row?').exists()

    def test_non_numeric_points(self):
        result = import_questions((HEADER + "Q?,General,easy,many,Yes|No,Yes\n").encode('utf-8'))
        assert result.created == 0
        assert len(result.errors) == 1

    @pytest.mark.parametrize("row", [
        "Too many?,General,easy,1,A|B|C|D|E,A\n",
        "No answer?,General,easy,1,Yes|No,Maybe\n",
        "Odd level?,General,extreme,1,Yes|No,Yes\n",
        ",General,easy,1,Yes|No,Yes\n",
    ])
    def test_rejected_rows(self, row):
        result = import_questions((HEADER + row).encode('utf-8'))
        assert result.created == 0
        assert len(result.errors) == 1
