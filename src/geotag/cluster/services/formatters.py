from typing import Callable, List

from geotag.cluster.schema import ClusterNode, OrganizeResponse
from geotag.models.cluster import ClusterResult
from geotag.models.photo import PhotoRecord


def place_label(photo: PhotoRecord) -> str:
    """Place name of the representative photo, or its raw coordinates."""
    if photo.place_name:
        return photo.place_name
    if photo.has_location:
        return f"{photo.lat}, {photo.lon}"
    return "Unknown place"


def event_label(photo: PhotoRecord) -> str:
    captured_at = photo.captured_at
    return captured_at.isoformat() if captured_at else "Unknown time"


def format_cluster_tree(
    photos: List[PhotoRecord],
    result: ClusterResult,
    label: Callable[[PhotoRecord], str],
    noise_id: int = -1,
) -> List[ClusterNode]:
    """
    Turns a clustering result into a display tree of label to member paths,
    with unclustered photos in a separate noise node.
    """
    nodes = []
    for idx, cluster in enumerate(result.clusters):
        nodes.append(
            ClusterNode(
                id=idx,
                label=label(photos[cluster.representative]),
                photos=[photos[i].path for i in cluster.members],
                count=len(cluster),
            )
        )

    if result.noise:
        nodes.append(
            ClusterNode(
                id=noise_id,
                label="Unclustered",
                photos=[photos[i].path for i in result.noise],
                count=len(result.noise),
                is_noise=True,
            )
        )
    return nodes


def format_organize_response(photos: List[PhotoRecord], places: ClusterResult, events: ClusterResult) -> OrganizeResponse:
    return OrganizeResponse(
        places=format_cluster_tree(photos, places, place_label),
        events=format_cluster_tree(photos, events, event_label),
        total_photos=len(photos),
        located_photos=sum(1 for p in photos if p.has_location),
        named_photos=sum(1 for p in photos if p.place_name),
    )
