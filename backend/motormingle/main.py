import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pymongo.errors import PyMongoError

from .config import access_token_secret_configured, load_server_config_from_mongo
from .errors import MarketplaceError
from .mongo import close_mongo_client, ensure_indexes, get_mongo_db, mongo_enabled
from .routers import auth, bids, feedback, health, listings, saved_ads, users

app = FastAPI(title="Motor Mingle API")
logger = logging.getLogger("uvicorn.error")

app.add_middleware(
	CORSMiddleware,
	allow_origins=["*"],
	allow_credentials=True,
	allow_methods=["*"],
	allow_headers=["*"],
)

app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(auth.router, tags=["auth"])
app.include_router(users.router, tags=["users"])
app.include_router(listings.router, tags=["listings"])
app.include_router(bids.router, tags=["bids"])
app.include_router(saved_ads.router, tags=["saved-ads"])
app.include_router(feedback.router, tags=["feedback"])


@app.exception_handler(MarketplaceError)
async def marketplace_error_handler(request: Request, exc: MarketplaceError):
	return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(PyMongoError)
async def store_error_handler(request: Request, exc: PyMongoError):
	logger.exception("Store failure on %s %s", request.method, request.url.path)
	return JSONResponse(status_code=500, content={"message": "Internal server error"})


async def _connect_store():
	if not mongo_enabled():
		logger.warning("MongoDB not configured; set MONGODB_URI")
		return
	try:
		mdb = await get_mongo_db()
		if mdb is None:
			raise RuntimeError("Mongo client not available")
		await mdb.command("ping")
		# Load server config from Mongo at startup
		try:
			await load_server_config_from_mongo(mdb)
		except Exception as ce:
			logger.warning("Loading server config failed: %s", ce)
		try:
			await ensure_indexes(mdb)
		except Exception as ie:
			logger.warning("Index creation failed: %s", ie)
		logger.info("Database connected: MongoDB")
	except Exception as e:
		logger.warning("MongoDB ping failed: %s", e)


@app.on_event("startup")
async def on_startup():
	await _connect_store()
	# runtime config may supply the secret, so check after the store is loaded
	if not access_token_secret_configured():
		logger.warning("ACCESS_WEB_TOKEN not configured; signing tokens with the development secret")


@app.on_event("shutdown")
async def on_shutdown():
	close_mongo_client()


@app.get("/", response_class=PlainTextResponse)
def read_root():
	return "Motor Mingle Server is running fine"


if __name__ == "__main__":
	import uvicorn
	uvicorn.run(app, host="0.0.0.0", port=8000)
