from abc import ABC, abstractmethod
from typing import Sequence

from geotag.models.cluster import ClusterResult
from geotag.models.photo import PhotoRecord


class Clusterer(ABC):
    """Abstract base class for a clustering strategy over a photo collection."""

    @abstractmethod
    def cluster(self, photos: Sequence[PhotoRecord]) -> ClusterResult:
        """
        Partitions a collection of photos.

        Args:
            photos: The photos to cluster. Their positions are the indices used
                in the result.

        Returns:
            The clusters found, each a list of indices into `photos`, plus the
            indices that belong to no cluster.
        """
        raise NotImplementedError()
