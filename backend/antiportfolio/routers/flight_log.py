"""
Flight Log Router - validates a saved anti-portfolio before it is shown again
"""
from fastapi import APIRouter, File, HTTPException, UploadFile, status
from fastapi.responses import JSONResponse

from ..exceptions import InputError, SchemaValidationError
from ..schemas import to_wire
from ..services.flight_log import FLIGHT_LOG_KEY, load_flight_log

router = APIRouter(prefix="/api/flight-log", tags=["Flight Log"])


@router.post("/validate")
async def validate_flight_log(file: UploadFile = File(...)):
    raw = await file.read()
    try:
        data = load_flight_log(raw)
    except InputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except SchemaValidationError as e:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "error": "Invalid flight log",
                "message": str(e),
                "violations": [v.to_dict() for v in e.violations],
            },
        )
    return {"storageKey": FLIGHT_LOG_KEY, "data": to_wire(data)}
