from __future__ import annotations

from pathlib import Path
from typing import Iterator, Tuple

from movielens_graph.app.models.rows import MovieRow, RatingRow
from movielens_graph.app.services.csv_fields import (
    parse_float,
    parse_int,
    parse_timestamp,
    require_fields,
    split_fields,
    split_genres,
)


def iter_data_lines(path: Path) -> Iterator[Tuple[int, str]]:
    """Yield ``(line_no, line)`` for every data line, header excluded.

    Line numbers are 1-based file lines, so the first data row is line 2.
    Blank lines are skipped. The file is closed when the generator is
    exhausted or closed.
    """
    with path.open("r", encoding="utf-8", newline="") as f:
        f.readline()
        for line_no, line in enumerate(f, start=2):
            line = line.rstrip("\r\n")
            if not line.strip():
                continue
            yield line_no, line


def parse_movie_line(line: str, *, source: str = "", line_no: int = 0,
                     delimiter: str = ",", genre_delimiter: str = "|") -> MovieRow:
    fields = split_fields(line, delimiter)
    require_fields(fields, 3, source=source, line_no=line_no)
    return MovieRow(
        movie_id=parse_int(fields[0], "movieId", source=source, line_no=line_no),
        title=fields[1],
        genres=split_genres(fields[2], genre_delimiter, source=source, line_no=line_no),
        line_no=line_no,
    )


def parse_rating_line(line: str, *, source: str = "", line_no: int = 0, delimiter: str = ",") -> RatingRow:
    fields = split_fields(line, delimiter)
    require_fields(fields, 4, source=source, line_no=line_no)
    return RatingRow(
        user_id=parse_int(fields[0], "userId", source=source, line_no=line_no),
        movie_id=parse_int(fields[1], "movieId", source=source, line_no=line_no),
        rating=parse_float(fields[2], "rating", source=source, line_no=line_no),
        timestamp=parse_timestamp(fields[3], source=source, line_no=line_no),
        line_no=line_no,
    )
