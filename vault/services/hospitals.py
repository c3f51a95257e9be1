from __future__ import annotations

from typing import Optional

from django.db.models import Q

from ..exceptions import AppError
from ..models import Hospital
from .geo import DEFAULT_RADIUS_KM, with_distances


def list_hospitals(*, city: Optional[str] = None, hospital_type: Optional[str] = None,
                   search: Optional[str] = None, latitude: Optional[float] = None,
                   longitude: Optional[float] = None, radius: Optional[float] = None) -> list:
    qs = Hospital.objects.filter(is_verified=True)
    if city:
        qs = qs.filter(city__icontains=city)
    if hospital_type:
        qs = qs.filter(hospital_type=hospital_type)
    if search:
        qs = qs.filter(
            Q(hospital_name__icontains=search) | Q(address__icontains=search) | Q(city__icontains=search)
        )
    hospitals = list(qs.order_by('-rating', 'id'))
    if latitude is None or longitude is None:
        return hospitals
    return with_distances(hospitals, latitude, longitude, radius if radius is not None else DEFAULT_RADIUS_KM)


def get_hospital(hospital_id: int) -> Hospital:
    hospital = Hospital.objects.filter(pk=hospital_id).first()
    if hospital is None:
        raise AppError(404, 'Hospital not found')
    return hospital
