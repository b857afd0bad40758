from fastapi import APIRouter, Depends, Request

from ..schemas.session import BarcodeLookup, CountAdd, DepotSelect, ScanFrames, SessionStateOut
from ..services.session import CountSession

router = APIRouter()


def get_count_session(request: Request) -> CountSession:
    return request.app.state.count_session


@router.get("/", response_model=SessionStateOut)
async def read_session(session: CountSession = Depends(get_count_session)):
    return session.to_schema()


@router.post("/depots/refresh", response_model=SessionStateOut)
async def refresh_depots(session: CountSession = Depends(get_count_session)):
    await session.load_depots()
    return session.to_schema()


@router.put("/depot", response_model=SessionStateOut)
async def select_depot(payload: DepotSelect, session: CountSession = Depends(get_count_session)):
    session.select_depot(payload.depot_code)
    return session.to_schema()


@router.post("/lookup", response_model=SessionStateOut)
async def lookup_product(payload: BarcodeLookup, session: CountSession = Depends(get_count_session)):
    await session.fetch_product(payload.barcode)
    return session.to_schema()


@router.post("/scanner/open", response_model=SessionStateOut)
async def open_scanner(session: CountSession = Depends(get_count_session)):
    session.open_scanner()
    return session.to_schema()


@router.post("/scanner/close", response_model=SessionStateOut)
async def close_scanner(session: CountSession = Depends(get_count_session)):
    session.close_scanner()
    return session.to_schema()


@router.post("/scanner/frames", response_model=SessionStateOut)
async def report_scan(payload: ScanFrames, session: CountSession = Depends(get_count_session)):
    await session.report_scan(payload.codes)
    return session.to_schema()


@router.post("/items", response_model=SessionStateOut)
async def add_item(payload: CountAdd, session: CountSession = Depends(get_count_session)):
    session.add_current_product(payload.quantity, payload.note)
    return session.to_schema()


@router.delete("/items/{index}", response_model=SessionStateOut)
async def delete_item(index: int, session: CountSession = Depends(get_count_session)):
    session.remove_items([index])
    return session.to_schema()


@router.post("/submit", response_model=SessionStateOut)
async def submit_items(session: CountSession = Depends(get_count_session)):
    await session.submit_all()
    return session.to_schema()


@router.post("/alert/dismiss", response_model=SessionStateOut)
async def dismiss_alert(session: CountSession = Depends(get_count_session)):
    session.dismiss_alert()
    return session.to_schema()
