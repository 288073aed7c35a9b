"""
Database connection and initialization.
"""

import asyncpg
from typing import Optional
import logging

from yardsale.config import DatabaseConfig

logger = logging.getLogger(__name__)

# Global connection pool
pg_pool: Optional[asyncpg.Pool] = None


async def init_db(config: DatabaseConfig):
    """Initialize the database connection pool"""
    global pg_pool

    try:
        pg_pool = await asyncpg.create_pool(
            config.url,
            min_size=config.pool_min_size,
            max_size=config.pool_max_size,
        )
        logger.info("PostgreSQL connection pool created")

        # Create tables
        await create_tables(config)
    except Exception as e:
        logger.error(f"Failed to connect to PostgreSQL: {e}")
        raise


async def close_db():
    """Close database connections"""
    global pg_pool

    if pg_pool:
        await pg_pool.close()
        pg_pool = None
        logger.info("PostgreSQL connection pool closed")


async def create_tables(config: DatabaseConfig):
    """
    Create the sales table if it doesn't exist.

    PostGIS objects (geometry column, index, search function) are created
    only when the extension is available. Without them the search
    endpoint runs in degraded mode.
    """
    table = config.sales_table

    async with pg_pool.acquire() as conn:
        await conn.execute(f"""
            CREATE TABLE IF NOT EXISTS {table} (
                id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
                owner_id UUID,
                title TEXT NOT NULL,
                description TEXT,
                address TEXT,
                city TEXT,
                state TEXT,
                zip_code TEXT,
                lat DOUBLE PRECISION,
                lng DOUBLE PRECISION,
                date_start DATE NOT NULL,
                time_start TIME,
                date_end DATE,
                time_end TIME,
                tags TEXT[] NOT NULL DEFAULT '{{}}',
                status TEXT NOT NULL DEFAULT 'draft',
                privacy_mode TEXT NOT NULL DEFAULT 'exact',
                created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
                updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
            )
        """)

        await conn.execute(f"""
            CREATE INDEX IF NOT EXISTS idx_{table}_lat_lng ON {table}(lat, lng);
        """)

        await conn.execute(f"""
            CREATE INDEX IF NOT EXISTS idx_{table}_status ON {table}(status);
        """)

        await conn.execute(f"""
            CREATE INDEX IF NOT EXISTS idx_{table}_tags ON {table} USING GIN(tags);
        """)

        try:
            await create_spatial_objects(conn, config)
        except asyncpg.PostgresError as e:
            logger.warning(f"PostGIS setup skipped, spatial search will run degraded: {e}")

        logger.info("Database tables created/verified")


async def create_spatial_objects(conn: asyncpg.Connection, config: DatabaseConfig):
    """Create the PostGIS column, index and radius search function

    Distances are measured on the sphere (use_spheroid = false) so the
    procedure agrees with the application's haversine distance.
    """
    table = config.sales_table

    async with conn.transaction():
        await conn.execute("CREATE EXTENSION IF NOT EXISTS postgis")

        await conn.execute(f"""
            ALTER TABLE {table} ADD COLUMN IF NOT EXISTS geom geography(Point, 4326)
            GENERATED ALWAYS AS (ST_SetSRID(ST_MakePoint(lng, lat), 4326)::geography) STORED
        """)

        await conn.execute(f"""
            CREATE INDEX IF NOT EXISTS idx_{table}_geom ON {table} USING GIST(geom);
        """)

        await conn.execute(f"""
            CREATE OR REPLACE FUNCTION {config.spatial_function}(
                p_lat DOUBLE PRECISION,
                p_lng DOUBLE PRECISION,
                p_radius_m DOUBLE PRECISION,
                p_city TEXT DEFAULT NULL,
                p_categories TEXT[] DEFAULT NULL,
                p_date_start DATE DEFAULT NULL,
                p_date_end DATE DEFAULT NULL,
                p_limit INTEGER DEFAULT 74
            )
            RETURNS TABLE (
                id UUID,
                title TEXT,
                description TEXT,
                lat DOUBLE PRECISION,
                lng DOUBLE PRECISION,
                city TEXT,
                state TEXT,
                zip_code TEXT,
                date_start DATE,
                time_start TIME,
                date_end DATE,
                time_end TIME,
                tags TEXT[],
                status TEXT,
                privacy_mode TEXT,
                distance_meters DOUBLE PRECISION
            )
            LANGUAGE sql STABLE
            AS $$
                SELECT s.id, s.title, s.description, s.lat, s.lng, s.city, s.state,
                       s.zip_code, s.date_start, s.time_start, s.date_end, s.time_end,
                       s.tags, s.status, s.privacy_mode,
                       ST_Distance(s.geom, ST_SetSRID(ST_MakePoint(p_lng, p_lat), 4326)::geography, false)
                           AS distance_meters
                FROM {table} s
                WHERE s.status = 'published'
                  AND s.geom IS NOT NULL
                  AND ST_DWithin(s.geom, ST_SetSRID(ST_MakePoint(p_lng, p_lat), 4326)::geography, p_radius_m, false)
                  AND (p_city IS NULL OR s.city ILIKE '%' || p_city || '%')
                  AND (p_categories IS NULL OR s.tags && p_categories)
                  AND (p_date_end IS NULL OR s.date_start <= p_date_end)
                  AND (p_date_start IS NULL OR COALESCE(s.date_end, s.date_start) >= p_date_start)
                ORDER BY distance_meters, s.date_start, s.time_start, s.id
                LIMIT p_limit
            $$
        """)


def get_pg_pool() -> asyncpg.Pool:
    """Get PostgreSQL connection pool"""
    if pg_pool is None:
        raise RuntimeError("Database not initialized")
    return pg_pool
