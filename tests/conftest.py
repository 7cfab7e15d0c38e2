"""Shared fixtures for the data-pipeline test suite."""

import textwrap

import pytest

from src.data_pipeline.ingestion import SnapshotIngester
from src.data_pipeline.transformation import SnapshotTransformer

# Small season 50 export: episode 1 is closed (Ann voted out, bob went with
# her), episode 2 has aired with alice's pick in.
EXPORTS = {
    "episodes.csv": """\
        id,number,title,air_date,is_complete
        ep-1,1,Premiere,2026-02-25T01:00:00+00:00,t
        ep-2,2,,2026-03-04T01:00:00+00:00,f
        ep-3,3,Week Three,2026-03-11T01:00:00+00:00,false
        ,,,,
        """,
    "contestants.csv": """\
        id,name,season,tribe,is_eliminated,eliminated_at_episode
        c-1,Ann Alpha,50,Vatu,true,1
        c-2,Bo Beta,50,Cila,false,
        c-3,Cy Gamma,50,Kalo,f,
        c-4,Di Delta,50, Vatu ,FALSE,
        x-1,Old Timer,49,,false,
        """,
    "leagues.csv": """\
        id,name,season,invite_code,host_id
        L1,Test League,50,ABC123,u1
        """,
    "league_members.csv": """\
        league_id,user_id,username,is_eliminated,eliminated_at_episode
        L1,u1,alice,false,
        L1,u2,bob,true,1
        L1,u3,cara,false,
        """,
    "picks.csv": """\
        id,league_id,user_id,episode_id,contestant_id,created_at
        pk1,L1,u1,ep-1,c-2,2026-02-24T20:00:00+00:00
        pk2,L1,u2,ep-1,c-1,2026-02-24T21:00:00+00:00
        pk3,L1,u3,ep-1,c-3,2026-02-24T22:00:00+00:00
        pk4,L1,u1,ep-2,c-3,2026-03-03T20:00:00+00:00
        """,
}


@pytest.fixture
def export_dir(tmp_path):
    """Directory holding a full set of table exports."""
    directory = tmp_path / "raw"
    directory.mkdir()
    for filename, content in EXPORTS.items():
        (directory / filename).write_text(textwrap.dedent(content))
    return directory


@pytest.fixture
def ingester(export_dir):
    return SnapshotIngester(export_dir)


@pytest.fixture
def frames(ingester):
    """All five tables as typed DataFrames."""
    return ingester.read_all()


@pytest.fixture
def transformer():
    return SnapshotTransformer()


@pytest.fixture
def snapshot(transformer, frames):
    return transformer.to_snapshot(frames)
