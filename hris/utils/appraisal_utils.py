from typing import List

from hris.models.appraisals import AppraisalStatus


def calculate_overall_score(criteria: List[dict], responses: List[dict]) -> float:
    """Weighted mean of final scores, weights taken from the matching criteria."""
    weights = {item["id"]: item.get("weight", 1.0) for item in criteria}

    total_weight = 0.0
    weighted_sum = 0.0
    for response in responses:
        weight = weights.get(response.get("criteriaId"), 1.0 if not weights else 0.0)
        total_weight += weight
        weighted_sum += weight * (response.get("finalScore") or 0)

    if total_weight == 0:
        return 0
    return round(weighted_sum / total_weight, 2)


def merge_self_assessment(responses: List[dict], self_assessment: List[dict]) -> List[dict]:
    """Overlay an employee's self scores onto existing responses, leaving manager fields alone."""
    merged = {response["criteriaId"]: dict(response) for response in responses}
    for item in self_assessment:
        current = merged.setdefault(item["criteriaId"], {"criteriaId": item["criteriaId"], "finalScore": 0})
        current.update({key: value for key, value in item.items() if value is not None})
    return list(merged.values())


# transitions an employee may trigger on their own appraisal
EMPLOYEE_STATUS_TRANSITIONS = {
    AppraisalStatus.DRAFT: AppraisalStatus.SELF_ASSESSMENT,
    AppraisalStatus.SELF_ASSESSMENT: AppraisalStatus.MANAGER_REVIEW,
}
