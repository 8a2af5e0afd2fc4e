import threading

import pytest

from core.geocoding.gazetteer import GazetteerGeocoder
from geotag.cluster.services.formatters import format_organize_response
from geotag.cluster.services.pipeline import PhotoGeotagPipeline
from geotag.config import EnrichmentConfig, JobConfig, PipelineConfig
from geotag.models.geocode import BoundingBox, GeocodeResult
from geotag.models.photo import LocationSource, PhotoRecord
from geotag.models.timeline import LocationTimeline, TimelinePoint

PARIS = GeocodeResult(name="Paris, France", bbox=BoundingBox(min_lon=2.22, max_lon=2.47, min_lat=48.81, max_lat=48.91))
LONDON = GeocodeResult(name="London, United Kingdom", bbox=BoundingBox(min_lon=-0.51, max_lon=0.33, min_lat=51.28, max_lat=51.69))

T0 = 1_600_000_000.0
DAY = 86_400.0


@pytest.fixture
def job_config():
    return JobConfig(
        job_id="job-1",
        pipeline=PipelineConfig(enrichment=EnrichmentConfig(tick_interval_s=0.001, max_workers=2)),
    )


@pytest.fixture
def timeline():
    return LocationTimeline([
        TimelinePoint(timestamp=T0 - 60, longitude=2.3525, latitude=48.8570, accuracy=15),
        TimelinePoint(timestamp=T0 + 200, longitude=2.3530, latitude=48.8575, accuracy=15),
        TimelinePoint(timestamp=T0 + DAY, longitude=-0.1276, latitude=51.5072, accuracy=20),
    ])


@pytest.fixture
def photos():
    paris_gps = [
        PhotoRecord(path=f"paris/gps{i}.jpg", timestamp=T0 + 30 * i, lat=48.8566 + i * 1e-4, lon=2.3522)
        for i in range(4)
    ]
    paris_timeline = [PhotoRecord(path=f"paris/nogps{i}.jpg", timestamp=T0 + 120 + 30 * i) for i in range(6)]
    london_timeline = [PhotoRecord(path=f"london/{i}.jpg", timestamp=T0 + DAY + 10 * i) for i in range(3)]
    lost = [PhotoRecord(path="lost.jpg")]
    return paris_gps + paris_timeline + london_timeline + lost


@pytest.mark.asyncio
async def test_pipeline_geotags_clusters_and_names(job_config, photos, timeline):
    pipeline = PhotoGeotagPipeline(job_config, photos, timeline, GazetteerGeocoder([PARIS, LONDON]))

    result = await pipeline.run()

    # Geotagging
    assert all(p.location_source == LocationSource.TIMELINE for p in photos[4:13])
    assert photos[13].location is None

    # Places: Paris (4 embedded + 6 resolved) and London (3 resolved)
    assert result.places.partition() == {frozenset(range(10)), frozenset({10, 11, 12})}
    assert result.places.noise == [13]
    assert {p.place_name for p in photos[:10]} == {"Paris, France"}
    assert {p.place_name for p in photos[10:13]} == {"London, United Kingdom"}
    assert photos[13].place_name is None

    # Events: only the ten Paris photos form a dense enough burst
    assert result.events.partition() == {frozenset(range(10))}


@pytest.mark.asyncio
async def test_pipeline_without_geocoder_or_timeline(job_config, photos):
    pipeline = PhotoGeotagPipeline(job_config, photos)

    result = await pipeline.run()

    assert result.places.partition() == {frozenset(range(4))}
    assert all(p.place_name is None for p in photos)


@pytest.mark.asyncio
async def test_response_tree(job_config, photos, timeline):
    pipeline = PhotoGeotagPipeline(job_config, photos, timeline, GazetteerGeocoder([PARIS]))
    result = await pipeline.run()

    response = format_organize_response(result.photos, result.places, result.events)

    labels = [node.label for node in response.places]
    assert labels[:-1] == ["Paris, France", "51.5072, -0.1276"]
    noise = response.places[-1]
    assert noise.is_noise and noise.id == -1 and noise.photos == ["lost.jpg"]
    assert response.places[0].count == 10
    assert response.events[0].label == "2020-09-13T12:26:40+00:00"
    assert response.total_photos == 14
    assert response.located_photos == 13
    assert response.named_photos == 10


class CountingGazetteer(GazetteerGeocoder):
    def __init__(self, entries):
        super().__init__(entries)
        self.calls = 0

    def reverse(self, lat, lon):
        self.calls += 1
        return super().reverse(lat, lon)


@pytest.mark.asyncio
async def test_pipeline_names_neighbouring_places_with_one_lookup(job_config):
    marais = [PhotoRecord(path=f"marais{i}.jpg", timestamp=T0 + i, lat=48.8590 + i * 1e-4, lon=2.3620) for i in range(3)]
    eiffel = [PhotoRecord(path=f"eiffel{i}.jpg", timestamp=T0 + DAY + i, lat=48.8580 + i * 1e-4, lon=2.2950) for i in range(3)]
    geocoder = CountingGazetteer([PARIS])

    result = await PhotoGeotagPipeline(job_config, marais + eiffel, geocoder=geocoder).run()

    assert len(result.places.clusters) == 2
    assert geocoder.calls == 1
    assert all(p.place_name == "Paris, France" for p in result.photos)


@pytest.mark.asyncio
async def test_clustering_runs_off_the_event_loop_thread(job_config, photos, timeline):
    pipeline = PhotoGeotagPipeline(job_config, photos, timeline)
    threads = []
    place_cluster = pipeline.place_clusterer.cluster

    def recording_cluster(records):
        threads.append(threading.get_ident())
        return place_cluster(records)

    pipeline.place_clusterer.cluster = recording_cluster
    await pipeline.run()

    assert threads and threads[0] != threading.get_ident()
