import logging
from pathlib import Path

import pytest

from apps.fetcher import course_data
from apps.fetcher import help as help_fetch
from apps.fetcher.jobs import course_data_jobs, help_jobs
from apps.fetcher.runner import FetchRunner
from tests.conftest import output_files
from utils.http import AuthenticationError, ConfigurationError


def test_check_credentials_raises_for_missing(make_settings):
    runner = FetchRunner(make_settings(ACCESS_PLANIT_PASS=""))

    with pytest.raises(ConfigurationError, match="ACCESS_PLANIT_PASS"):
        runner.check_credentials()


async def test_run_fetches_one_token_for_all_jobs(settings, fake_api):
    runner = FetchRunner(settings, transport=fake_api.transport)

    outcomes = await runner.run(help_jobs(settings))

    assert [o.ok for o in outcomes] == [True, True]
    assert len(fake_api.requests_to("/api/v2/token")) == 1
    assert output_files(Path(settings.OUTPUT_DIR))[0].startswith("course-date-help-")


async def test_one_failing_job_does_not_affect_sibling(settings, fake_api, caplog):
    caplog.set_level(logging.INFO)
    fake_api.respond("/api/v2/coursedate", 500, {"message": "boom"})
    runner = FetchRunner(settings, transport=fake_api.transport)

    outcomes = await runner.run(course_data_jobs(settings, 10))

    assert [(o.kind, o.ok) for o in outcomes] == [("course-templates", True), ("course-dates", False)]
    assert "Course Templates: ✅ Success" in caplog.text
    assert "Course Dates: ❌ Failed" in caplog.text
    assert "Course Dates Error:" in caplog.text
    assert "Course Templates Error" not in caplog.text


async def test_unexpected_job_exception_becomes_failure(settings, fake_api, monkeypatch):
    async def explode(job, api, token, writer):
        raise RuntimeError("unexpected")

    monkeypatch.setattr("apps.fetcher.runner.run_job", explode)
    runner = FetchRunner(settings, transport=fake_api.transport)

    outcomes = await runner.run(help_jobs(settings))

    assert [o.error for o in outcomes] == ["unexpected", "unexpected"]


async def test_run_propagates_authentication_error(settings, fake_api):
    fake_api.respond("/api/v2/token", 401, {"error": "invalid_grant"})
    runner = FetchRunner(settings, transport=fake_api.transport)

    with pytest.raises(AuthenticationError):
        await runner.run(help_jobs(settings))

    assert fake_api.requests_to("/api/v2/coursedate") == []


# Entry point scenarios


async def test_course_data_happy_path(env_credentials, fake_api, patch_transport, tmp_path, caplog):
    caplog.set_level(logging.INFO)
    patch_transport(fake_api)

    await course_data.main([])

    files = output_files(tmp_path / "output")
    assert len(files) == 2
    assert files[0].startswith("course-dates-")
    assert files[1].startswith("course-templates-")
    assert "Retrieved 3 course templates" in caplog.text
    assert "Retrieved 3 course dates" in caplog.text
    assert "Using limit: 10" in caplog.text
    [templates] = fake_api.requests_to("/api/v2/coursetemplate")
    assert templates.url.params["$top"] == "10"


async def test_course_data_limit_argument(env_credentials, fake_api, patch_transport):
    patch_transport(fake_api)

    await course_data.main(["--limit", "5"])

    [templates] = fake_api.requests_to("/api/v2/coursetemplate")
    assert templates.url.params["$top"] == "5"
    assert templates.url.params["$orderby"] == "Name asc"
    [dates] = fake_api.requests_to("/api/v2/coursedate")
    assert dates.url.params["$top"] == "5"
    assert dates.url.params["$orderby"] == "StartDate asc"


@pytest.mark.parametrize("value", ["abc", "0", "-3", "2.5"])
async def test_course_data_rejects_invalid_limit(env_credentials, fake_api, patch_transport, value):
    patch_transport(fake_api)

    with pytest.raises(SystemExit) as exc_info:
        await course_data.main(["--limit", value])

    assert exc_info.value.code == 2
    assert fake_api.requests == []


@pytest.mark.parametrize("missing", ["ACCESS_PLANIT_USER", "ACCESS_PLANIT_PASS"])
async def test_missing_credentials_exit_before_network(
    env_credentials, fake_api, patch_transport, monkeypatch, caplog, missing
):
    monkeypatch.delenv(missing)
    patch_transport(fake_api)

    with pytest.raises(SystemExit) as exc_info:
        await course_data.main([])

    assert exc_info.value.code == 1
    assert fake_api.requests == []
    assert "Missing required environment variables" in caplog.text


async def test_token_failure_exits_with_no_output(env_credentials, fake_api, patch_transport, tmp_path, caplog):
    fake_api.respond("/api/v2/token", 401, {"error": "invalid_grant"})
    patch_transport(fake_api)

    with pytest.raises(SystemExit) as exc_info:
        await course_data.main([])

    assert exc_info.value.code == 1
    assert output_files(tmp_path / "output") == []
    assert "Response status: 401" in caplog.text


async def test_course_dates_500_still_writes_templates(env_credentials, fake_api, patch_transport, tmp_path, caplog):
    caplog.set_level(logging.INFO)
    fake_api.respond("/api/v2/coursedate", 500, {"message": "boom"})
    patch_transport(fake_api)

    await course_data.main([])

    files = output_files(tmp_path / "output")
    assert len(files) == 1
    assert files[0].startswith("course-templates-")
    assert "Course Dates: ❌ Failed" in caplog.text
    assert "Failed to fetch course dates" in caplog.text
    assert "Failed to fetch course templates" not in caplog.text


async def test_help_main_writes_both_help_files(env_credentials, fake_api, patch_transport, tmp_path):
    patch_transport(fake_api)

    await help_fetch.main()

    files = output_files(tmp_path / "output")
    assert len(files) == 2
    assert files[0].startswith("course-date-help-")
    assert files[1].startswith("course-template-help-")
    assert fake_api.requests_to("/apihelp/v2/modules/courseDate")[0].url.query == b""
