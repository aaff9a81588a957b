# rollodex/services/asset_service.py
import os
import uuid

from flask import current_app
from werkzeug.utils import secure_filename

from ..errors import NoFiles, InvalidFileType, FileTooLarge, Forbidden, NotFound, ValidationError
from ..models import db, Brand, Asset, AssetPermissionEnum
from ..utils import allowed_file, get_file_extension, sanitize_input, is_valid_id

# What non-owners of a public brand may see
SHARED_PERMISSION_LEVELS = (AssetPermissionEnum.PUBLIC, AssetPermissionEnum.PARTNERS_ONLY)


def _get_brand_or_404(brand_id):
    brand = db.session.get(Brand, brand_id) if is_valid_id(brand_id) else None
    if brand is None:
        raise NotFound("Brand not found")
    return brand


def _file_size(file_storage):
    stream = file_storage.stream
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return size


def _parse_permission_level(value):
    if value is None or value == '':
        return AssetPermissionEnum.PARTNERS_ONLY
    try:
        return AssetPermissionEnum(str(value).strip().lower())
    except ValueError:
        allowed = ', '.join(p.value for p in AssetPermissionEnum)
        raise ValidationError(f"Invalid permission level '{value}'. Allowed: {allowed}")


def validate_upload(file_storage):
    """
    Checks one uploaded file against the extension and MIME allow-lists and
    the per-file size limit. Returns (extension, size).
    """
    filename = file_storage.filename or ''
    if not filename or not allowed_file(filename):
        raise InvalidFileType(f"File type not allowed: {filename or '(unnamed)'}")

    mime_type = (file_storage.mimetype or '').lower()
    if mime_type not in current_app.config['ALLOWED_MIME_TYPES']:
        raise InvalidFileType(f"File type not allowed: {filename} ({mime_type or 'unknown'})")

    size = _file_size(file_storage)
    max_size = current_app.config['MAX_FILE_SIZE']
    if size > max_size:
        raise FileTooLarge(f"{filename} exceeds the {max_size // (1024 * 1024)}MB limit")
    return get_file_extension(filename), size


def brand_upload_dir(brand_id):
    return os.path.join(current_app.config['UPLOAD_FOLDER'], 'brands', str(brand_id))


def upload(brand_id, requesting_user_id, files, description=None, category=None, permission_level=None):
    """
    Stores every file under the brand's upload directory and records an
    Asset row for each. All files are validated before anything is written.

    Only the brand owner may upload. Every self-registered account holds an
    *_admin role, so an admin role grants nothing beyond ownership here.
    """
    brand = _get_brand_or_404(brand_id)
    if not brand.is_owned_by(requesting_user_id):
        current_app.logger.warning(f"User {requesting_user_id} attempted to upload assets to brand {brand.id}")
        raise Forbidden("Only the brand owner can upload assets")

    files = [f for f in (files or []) if f and f.filename]
    if not files:
        raise NoFiles()
    max_files = current_app.config['MAX_FILES_PER_REQUEST']
    if len(files) > max_files:
        raise ValidationError(f"At most {max_files} files can be uploaded at once")

    permission = _parse_permission_level(permission_level)
    validated = [(f, *validate_upload(f)) for f in files]

    upload_dir = brand_upload_dir(brand.id)
    os.makedirs(upload_dir, exist_ok=True)
    url_prefix = current_app.config.get('UPLOAD_URL_PREFIX', '/uploads')

    written, assets = [], []
    try:
        for file_storage, extension, size in validated:
            filename = f"{uuid.uuid4().hex}.{extension}"
            full_path = os.path.join(upload_dir, filename)
            file_storage.save(full_path)
            written.append(full_path)

            relative_path = f"brands/{brand.id}/{filename}"
            asset = Asset(
                brand_id=brand.id,
                filename=filename,
                original_name=secure_filename(file_storage.filename) or filename,
                mime_type=file_storage.mimetype,
                file_size=size,
                file_path=relative_path,
                file_url=f"{url_prefix}/{relative_path}",
                description=sanitize_input(description),
                category=sanitize_input(category, max_length=100),
                permission_level=permission,
                uploaded_by=int(requesting_user_id),
            )
            db.session.add(asset)
            assets.append(asset)
        db.session.commit()
    except Exception:
        db.session.rollback()
        for path in written:
            _remove_file(path)
        raise

    current_app.logger.info(f"{len(assets)} asset(s) uploaded to brand {brand.id} by user {requesting_user_id}")
    return assets


def _visible_query(brand, requesting_user_id):
    query = brand.assets
    if not brand.is_owned_by(requesting_user_id):
        if not brand.is_public:
            raise Forbidden("Access denied")
        query = query.filter(Asset.permission_level.in_(SHARED_PERMISSION_LEVELS))
    return query


def visible_assets(brand, requesting_user_id):
    """Owner sees everything; others see shared assets of a public brand."""
    return (_visible_query(brand, requesting_user_id)
            .order_by(Asset.is_featured.desc(), Asset.created_at.desc(), Asset.id.desc())
            .all())


def list_assets(brand_id, requesting_user_id):
    return visible_assets(_get_brand_or_404(brand_id), requesting_user_id)


def get_for_download(brand_id, asset_id, requesting_user_id):
    """Returns (asset, absolute path) and counts the download."""
    brand = _get_brand_or_404(brand_id)
    asset = None
    if is_valid_id(asset_id):
        asset = _visible_query(brand, requesting_user_id).filter(Asset.id == asset_id).first()
    if asset is None:
        raise NotFound("Asset not found")

    full_path = os.path.join(current_app.config['UPLOAD_FOLDER'], asset.file_path)
    if not os.path.isfile(full_path):
        current_app.logger.error(f"Asset {asset.id} is missing its file at {full_path}")
        raise NotFound("Asset file not found")

    asset.download_count = (asset.download_count or 0) + 1
    db.session.commit()
    return asset, full_path


def _remove_file(path):
    try:
        os.remove(path)
    except FileNotFoundError:
        pass


def delete(brand_id, asset_id, requesting_user_id):
    brand = _get_brand_or_404(brand_id)
    if not brand.is_owned_by(requesting_user_id):
        raise Forbidden("Only the brand owner can delete assets")

    asset = brand.assets.filter(Asset.id == asset_id).first() if is_valid_id(asset_id) else None
    if asset is None:
        raise NotFound("Asset not found")

    _remove_file(os.path.join(current_app.config['UPLOAD_FOLDER'], asset.file_path))
    db.session.delete(asset)
    db.session.commit()
    current_app.logger.info(f"Asset {asset_id} deleted from brand {brand.id}")
