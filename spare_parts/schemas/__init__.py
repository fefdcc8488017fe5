"""
Pydantic schemas for request/response validation.
"""
from spare_parts.schemas.common import OperationResult
from spare_parts.schemas.user import (
    UserResponse, LoginRequest, RegisterRequest, AuthResponse, UserRoleUpdate
)
from spare_parts.schemas.category import (
    CategoryBase, CategoryCreate, CategoryUpdate, CategoryResponse, CategoryResult
)
from spare_parts.schemas.part import (
    PartSortField, SortOrder, PartBase, PartCreate, PartUpdate, PartsFilter,
    PartCreator, PartResponse, PaginatedParts, PartResult
)
from spare_parts.schemas.dashboard import (
    ActivityUser, ActivityPart, ActivityLogResponse, CategoryCount,
    DashboardStats, ActivityLogQuery, ActivityLogPage
)
from spare_parts.schemas.import_export import (
    ColumnMapping, ImportPreview, ImportRequest, ImportResult, ExportResult
)
