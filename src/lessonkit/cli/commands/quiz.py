"""Quiz command: show the quiz questions of a lesson."""

from pathlib import Path

import click

from lessonkit.cli.commands.shared import load_lessons


@click.command()
@click.argument(
    "lesson-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option("--reveal", is_flag=True, help="Show the marked answers.")
def quiz(lesson_file: Path, reveal: bool):
    """Print the quiz questions of a lesson."""
    (lesson,) = load_lessons([lesson_file])

    if not lesson.quizzes:
        click.echo(f"{lesson.name} has no quiz questions.")
        return

    for number, question in enumerate(lesson.quizzes, 1):
        click.echo(f"{number}. {question.question or '(no question text)'}")
        for option in question.options:
            marker = "*" if reveal and option.label == question.answer_label else " "
            click.echo(f"  {marker} {option.label}) {option.text}")
        if reveal:
            answer = question.answer_label or "(not marked)"
            click.echo(f"  Answer: {answer}")
        click.echo()
